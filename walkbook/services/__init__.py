"""Service layer helpers."""

from .booking import BookingService
from .leaderboard import Leaderboard, LeaderboardEntry
from .notifications import (
    EventPublisher,
    LogNotifier,
    SlotBooked,
    SlotCancelled,
    TwilioNotifier,
    build_notifier,
)
from .slots import SlotStore, slot_to_dict
from .walkers import WalkerRegistry, walker_to_dict

__all__ = [
    "BookingService",
    "EventPublisher",
    "Leaderboard",
    "LeaderboardEntry",
    "LogNotifier",
    "SlotBooked",
    "SlotCancelled",
    "SlotStore",
    "TwilioNotifier",
    "WalkerRegistry",
    "build_notifier",
    "slot_to_dict",
    "walker_to_dict",
]
