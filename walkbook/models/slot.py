"""Database model for booked walking slots."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import now_ms


class WalkingSlot(SQLModel, table=True):
    """A booked half-hour walk. At most one row per (date, time)."""

    __tablename__ = "walking_slot"
    __table_args__ = (
        UniqueConstraint("date", "time", name="uq_walking_slot_date_time"),
    )

    id: Optional[int] = ORMField(default=None, primary_key=True)
    date: str = ORMField(max_length=10, index=True)  # YYYY-MM-DD
    time: str = ORMField(max_length=4)  # HHMM, 24-hour
    name: str = ORMField(index=True)
    contact: Optional[str] = None
    note: Optional[str] = None
    created_at: int = ORMField(default_factory=now_ms)  # epoch ms


__all__ = ["WalkingSlot"]
