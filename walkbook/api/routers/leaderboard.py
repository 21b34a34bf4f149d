"""Leaderboard endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from ...core import today_iso
from ...services import Leaderboard
from ..deps import get_leaderboard

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


@router.get("/all-time")
def get_all_time(
    leaderboard: Leaderboard = Depends(get_leaderboard),
) -> List[Dict[str, Any]]:
    """Walk counts across every booking ever made."""

    return [entry.as_dict() for entry in leaderboard.all_time()]


@router.get("/next-week")
def get_next_week(
    start: Optional[str] = None, leaderboard: Leaderboard = Depends(get_leaderboard)
) -> List[Dict[str, Any]]:
    """Walk counts for the seven days beginning at ``start`` (default: today)."""

    return [entry.as_dict() for entry in leaderboard.next_window(start or today_iso())]


__all__ = ["router"]
