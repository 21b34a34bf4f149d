"""Slot store: persistence of booked walks and the weekly schedule view."""

from __future__ import annotations

import logging
import re
from datetime import date as calendar_date
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, delete, select

from ..core import ConflictError, ValidationError, guarded, shift_iso
from ..models import WalkingSlot

logger = logging.getLogger(__name__)

WEEK_DAYS = 7

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^\d{4}$")


# Validation -------------------------------------------------------------------


def _text(data: Mapping[str, Any], *keys: str) -> Optional[str]:
    """Return the first present value among ``keys`` (aliases), as text."""

    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValidationError(f"{keys[0]} must be a string")
        return value
    return None


def validate_date(value: Any) -> str:
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ValidationError("Date must be in YYYY-MM-DD format")
    try:
        calendar_date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"Date {value} is not a calendar date") from exc
    return value


def validate_time(value: Any) -> str:
    if not isinstance(value, str) or not _TIME_RE.match(value):
        raise ValidationError("Time must be in 24-hour HHMM format")
    if int(value[:2]) > 23 or int(value[2:]) > 59:
        raise ValidationError(f"Time {value} is not a valid clock time")
    return value


def validate_name(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Name is required")
    return value.strip()


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def parse_slot_key(data: Mapping[str, Any]) -> Dict[str, str]:
    """Validate the ``{date, time, name}`` triple used by cancellation."""

    if not isinstance(data, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return {
        "date": validate_date(data.get("date")),
        "time": validate_time(data.get("time")),
        "name": validate_name(data.get("name")),
    }


def parse_slot_input(data: Mapping[str, Any]) -> Dict[str, Optional[str]]:
    """Validate a booking request body into clean column values.

    ``phone`` and ``notes`` are accepted as aliases of ``contact`` and
    ``note``.
    """

    cleaned: Dict[str, Optional[str]] = dict(parse_slot_key(data))
    cleaned["contact"] = _optional(_text(data, "contact", "phone"))
    cleaned["note"] = _optional(_text(data, "note", "notes"))
    return cleaned


# Bookable grid ----------------------------------------------------------------


def slot_times() -> List[str]:
    """Half-hour start times from 08:00 through 20:00."""

    times: List[str] = []
    for hour in range(8, 21):
        times.append(f"{hour:02d}00")
        if hour < 20:
            times.append(f"{hour:02d}30")
    return times


def format_time(value: str) -> str:
    """Render ``HHMM`` as a 12-hour label, e.g. ``1330`` -> ``1:30 PM``."""

    hour = int(value[:2])
    period = "PM" if hour >= 12 else "AM"
    hour12 = hour % 12 or 12
    return f"{hour12}:{value[2:]} {period}"


def week_dates(start: str) -> List[str]:
    """The seven consecutive calendar dates beginning at ``start``."""

    return [shift_iso(start, offset) for offset in range(WEEK_DAYS)]


def slot_to_dict(slot: WalkingSlot) -> Dict[str, Any]:
    """Serialise a slot model to API-friendly dict."""

    return {
        "date": slot.date,
        "time": slot.time,
        "name": slot.name,
        "contact": slot.contact,
        "note": slot.note,
        "createdAt": slot.created_at,
    }


class SlotStore:
    """Authoritative storage of booked slots.

    Uniqueness of ``(date, time)`` is enforced by the table's unique
    constraint; the pre-insert lookup only produces a friendlier fast path.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @guarded
    def get_week(self, start: str) -> Dict[str, List[WalkingSlot]]:
        """Return exactly seven date keys mapped to their slots, time-sorted."""

        dates = week_dates(validate_date(start))
        schedule: Dict[str, List[WalkingSlot]] = {day: [] for day in dates}
        rows = self._session.exec(
            select(WalkingSlot)
            .where(WalkingSlot.date >= dates[0], WalkingSlot.date <= dates[-1])
            .order_by(WalkingSlot.date, WalkingSlot.time)
        ).all()
        for slot in rows:
            schedule[slot.date].append(slot)
        return schedule

    @guarded
    def get_slot(self, date: str, time: str) -> Optional[WalkingSlot]:
        return self._session.exec(
            select(WalkingSlot).where(
                WalkingSlot.date == date, WalkingSlot.time == time
            )
        ).first()

    @guarded
    def available_times(self, date: str) -> List[Dict[str, str]]:
        """Grid times on ``date`` that nobody has booked yet."""

        validate_date(date)
        booked = set(
            self._session.exec(
                select(WalkingSlot.time).where(WalkingSlot.date == date)
            ).all()
        )
        return [
            {"value": value, "label": format_time(value)}
            for value in slot_times()
            if value not in booked
        ]

    @guarded
    def add_slot(self, data: Mapping[str, Any]) -> WalkingSlot:
        """Validate and persist a new booking.

        Raises ``ValidationError`` before touching the store, and
        ``ConflictError`` when the slot is already taken, including when a
        concurrent writer wins the race between lookup and insert.
        """

        cleaned = parse_slot_input(data)
        if self.get_slot(cleaned["date"], cleaned["time"]) is not None:
            logger.info("Slot %s %s already booked", cleaned["date"], cleaned["time"])
            raise ConflictError("Slot already booked")

        slot = WalkingSlot(**cleaned)
        self._session.add(slot)
        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            logger.info("Lost booking race for %s %s", cleaned["date"], cleaned["time"])
            raise ConflictError("Slot already booked") from exc
        self._session.refresh(slot)
        # Detach so later commits in this session leave the loaded row intact.
        self._session.expunge(slot)
        return slot

    @guarded
    def remove_slot(self, date: str, time: str, owner: Optional[str] = None) -> bool:
        """Delete the slot at ``(date, time)``; ``False`` if there was none.

        With ``owner`` given, a slot booked under any other name is left alone
        and reported as absent. The match and the delete are one statement, so
        of two concurrent removals only one reports ``True``.
        """

        statement = delete(WalkingSlot).where(
            WalkingSlot.date == date, WalkingSlot.time == time
        )
        if owner is not None:
            statement = statement.where(WalkingSlot.name == owner)
        result = self._session.exec(statement)
        self._session.commit()
        return result.rowcount == 1


__all__ = [
    "SlotStore",
    "WEEK_DAYS",
    "format_time",
    "parse_slot_input",
    "parse_slot_key",
    "slot_times",
    "slot_to_dict",
    "validate_date",
    "validate_name",
    "validate_time",
    "week_dates",
]
