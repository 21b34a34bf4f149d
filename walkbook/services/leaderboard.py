"""Walk-count leaderboards derived from booked slots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlmodel import Session, func, select

from ..core import guarded, shift_iso
from ..models import WalkingSlot
from .slots import WEEK_DAYS, validate_date
from .walkers import WalkerRegistry


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    total_walks: int
    color_index: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "totalWalks": self.total_walks,
            "colorIndex": self.color_index,
        }


class Leaderboard:
    """Read-only rankings: most walks first, ties broken by name ascending."""

    def __init__(self, session: Session, walkers: WalkerRegistry) -> None:
        self._session = session
        self._walkers = walkers

    def all_time(self) -> List[LeaderboardEntry]:
        return self._rank()

    def next_window(self, start: str) -> List[LeaderboardEntry]:
        """Rank walks dated within ``[start, start + 7 days)``."""

        start = validate_date(start)
        return self._rank(start, shift_iso(start, WEEK_DAYS))

    @guarded
    def _rank(
        self, start: Optional[str] = None, end: Optional[str] = None
    ) -> List[LeaderboardEntry]:
        total = func.count(WalkingSlot.id).label("total")
        query = select(WalkingSlot.name, total).group_by(WalkingSlot.name)
        if start is not None and end is not None:
            query = query.where(WalkingSlot.date >= start, WalkingSlot.date < end)
        rows = self._session.exec(query.order_by(total.desc(), WalkingSlot.name)).all()

        colors = self._walkers.color_map(name for name, _ in rows)
        return [
            LeaderboardEntry(name=name, total_walks=count, color_index=colors[name])
            for name, count in rows
        ]


__all__ = ["Leaderboard", "LeaderboardEntry"]
