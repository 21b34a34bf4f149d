"""Booking orchestration: the only path that writes slots.

Per (date, time) key the lifecycle is ``Empty -> Booked(name) -> Empty``;
only the booking's own name may take it back to Empty.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..core import ForbiddenError, NotFoundError
from ..models import WalkingSlot
from .notifications import EventPublisher, SlotBooked, SlotCancelled
from .slots import SlotStore, parse_slot_key
from .walkers import WalkerRegistry

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(
        self,
        slots: SlotStore,
        walkers: WalkerRegistry,
        publisher: EventPublisher,
    ) -> None:
        self._slots = slots
        self._walkers = walkers
        self._publisher = publisher

    def book(self, data: Mapping[str, Any]) -> WalkingSlot:
        """Book a slot, then register the walker and announce the booking.

        Validation and conflict errors propagate untouched and leave the
        registry and notifier alone. Once the slot is stored the booking
        stands, whatever happens to the registry update or the alert.
        """

        slot = self._slots.add_slot(data)
        event = SlotBooked.from_slot(slot)
        logger.info("Slot %s %s booked by '%s'", slot.date, slot.time, slot.name)

        try:
            self._walkers.upsert(slot.name, slot.contact)
        except Exception:
            logger.exception("Walker update failed after booking by '%s'", slot.name)

        self._publisher.publish(event)
        return slot

    def cancel(self, data: Mapping[str, Any]) -> None:
        """Cancel a booking on behalf of the name that made it."""

        key = parse_slot_key(data)
        slot = self._slots.get_slot(key["date"], key["time"])
        if slot is None:
            raise NotFoundError("Slot not found")
        if slot.name != key["name"]:
            logger.info(
                "Rejected cancellation of %s %s by non-owner '%s'",
                key["date"],
                key["time"],
                key["name"],
            )
            raise ForbiddenError("Only the walker who booked this slot can cancel it")

        event = SlotCancelled.from_slot(slot, name=key["name"])
        if not self._slots.remove_slot(key["date"], key["time"], owner=key["name"]):
            raise NotFoundError("Slot not found")
        logger.info("Slot %s %s cancelled by '%s'", key["date"], key["time"], key["name"])

        self._publisher.publish(event)


__all__ = ["BookingService"]
