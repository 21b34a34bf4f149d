"""Database model for walkers (booking participants)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class Walker(SQLModel, table=True):
    """Participant identified by exact display name.

    ``color_round`` counts how many earlier walkers already held
    ``color_index`` when this one was registered. The unique pair makes two
    racing first registrations collide instead of silently sharing a colour.
    """

    __tablename__ = "walker"
    __table_args__ = (
        UniqueConstraint("color_index", "color_round", name="uq_walker_color"),
    )

    name: str = ORMField(primary_key=True)
    color_index: int
    color_round: int = 0
    contact: Optional[str] = None
    created_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["Walker"]
