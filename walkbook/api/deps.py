"""FastAPI dependencies wiring request sessions into services."""

from __future__ import annotations

from functools import lru_cache

from fastapi import BackgroundTasks, Depends
from sqlmodel import Session

from ..core import get_session
from ..services import (
    BookingService,
    EventPublisher,
    Leaderboard,
    SlotStore,
    WalkerRegistry,
    build_notifier,
)
from ..services.notifications import Notifier


@lru_cache(maxsize=1)
def get_notifier() -> Notifier:
    return build_notifier()


def get_slot_store(session: Session = Depends(get_session)) -> SlotStore:
    return SlotStore(session)


def get_walker_registry(session: Session = Depends(get_session)) -> WalkerRegistry:
    return WalkerRegistry(session)


def get_leaderboard(
    session: Session = Depends(get_session),
    walkers: WalkerRegistry = Depends(get_walker_registry),
) -> Leaderboard:
    return Leaderboard(session, walkers)


def get_booking_service(
    background_tasks: BackgroundTasks,
    slots: SlotStore = Depends(get_slot_store),
    walkers: WalkerRegistry = Depends(get_walker_registry),
    notifier: Notifier = Depends(get_notifier),
) -> BookingService:
    """Alerts are delivered after the response has been sent."""

    publisher = EventPublisher(notifier, schedule=background_tasks.add_task)
    return BookingService(slots, walkers, publisher)


__all__ = [
    "get_booking_service",
    "get_leaderboard",
    "get_notifier",
    "get_slot_store",
    "get_walker_registry",
]
