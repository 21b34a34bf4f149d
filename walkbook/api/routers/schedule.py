"""Schedule and slot booking endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, status

from ...core import NotFoundError, today_iso
from ...services import BookingService, SlotStore, slot_to_dict
from ...services.slots import validate_date, validate_time
from ..deps import get_booking_service, get_slot_store

router = APIRouter(prefix="/api", tags=["schedule"])


@router.get("/schedule")
def get_schedule(
    start: Optional[str] = None, slots: SlotStore = Depends(get_slot_store)
) -> Dict[str, List[Dict[str, Any]]]:
    """Seven days of bookings starting at ``start`` (default: today)."""

    week = slots.get_week(start or today_iso())
    return {day: [slot_to_dict(slot) for slot in booked] for day, booked in week.items()}


@router.get("/schedule/available")
def get_available_times(
    date: Optional[str] = None, slots: SlotStore = Depends(get_slot_store)
) -> List[Dict[str, str]]:
    """Bookable times still open on ``date`` (default: today)."""

    return slots.available_times(date or today_iso())


@router.get("/slot")
def get_slot(
    date: Optional[str] = None,
    time: Optional[str] = None,
    slots: SlotStore = Depends(get_slot_store),
):
    slot = slots.get_slot(validate_date(date), validate_time(time))
    if slot is None:
        raise NotFoundError("Slot not found")
    return slot_to_dict(slot)


@router.post("/slot", status_code=status.HTTP_201_CREATED)
def book_slot(
    body: Dict[str, Any] = Body(...),
    booking: BookingService = Depends(get_booking_service),
):
    """Book a walk; 409 when someone already holds the slot."""

    return slot_to_dict(booking.book(body))


@router.delete("/slot")
def cancel_slot(
    body: Dict[str, Any] = Body(...),
    booking: BookingService = Depends(get_booking_service),
) -> Dict[str, bool]:
    """Cancel a walk; only the name that booked it may do so."""

    booking.cancel(body)
    return {"success": True}


__all__ = ["router"]
