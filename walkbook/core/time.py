"""Clock helpers."""

from __future__ import annotations

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """Current instant as integer epoch milliseconds."""
    return int(utcnow().timestamp() * 1000)


def today_iso() -> str:
    """Today's calendar date in UTC, ``YYYY-MM-DD``."""
    return utcnow().date().isoformat()


def shift_iso(day: str, days: int) -> str:
    """Add ``days`` calendar days to an ISO date string."""
    return date.fromordinal(date.fromisoformat(day).toordinal() + days).isoformat()


__all__ = ["now_ms", "shift_iso", "today_iso", "utcnow"]
