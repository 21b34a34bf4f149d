"""Booking-change events and their delivery.

The core only promises to publish an event after every successful write.
Delivery happens outside the request's result path: whatever the notifier
does, the booking or cancellation has already succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date as calendar_date
from typing import Any, Callable, ClassVar, Dict, List, Optional, Protocol, Union

import httpx

from ..core import ALERT_TO, TWILIO_FROM, TWILIO_SID, TWILIO_TOKEN
from ..models import WalkingSlot
from .slots import format_time

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


@dataclass(frozen=True)
class _SlotEvent:
    action: ClassVar[str]

    date: str
    time: str
    name: str
    contact: Optional[str] = None
    note: Optional[str] = None

    @classmethod
    def from_slot(cls, slot: WalkingSlot, name: Optional[str] = None):
        return cls(
            date=slot.date,
            time=slot.time,
            name=name if name is not None else slot.name,
            contact=slot.contact,
            note=slot.note,
        )

    def as_payload(self) -> Dict[str, Any]:
        return {"action": self.action, **asdict(self)}


@dataclass(frozen=True)
class SlotBooked(_SlotEvent):
    action: ClassVar[str] = "book"


@dataclass(frozen=True)
class SlotCancelled(_SlotEvent):
    action: ClassVar[str] = "cancel"


BookingEvent = Union[SlotBooked, SlotCancelled]


class Notifier(Protocol):
    """Delivery channel for booking events."""

    def notify(self, event: BookingEvent) -> None: ...


def format_date(value: str) -> str:
    """``2025-04-20`` -> ``Sun, Apr 20``."""

    day = calendar_date.fromisoformat(value)
    return f"{day:%a}, {day:%b} {day.day}"


def format_message(event: BookingEvent) -> str:
    """Human-readable alert text for an event."""

    when = f"{format_date(event.date)} at {format_time(event.time)}"
    if isinstance(event, SlotBooked):
        return f"{event.name} booked {when}. Notes: {event.note or '-'}"
    if isinstance(event, SlotCancelled):
        return f"{event.name} canceled {when}."
    raise TypeError(f"Unsupported event type: {type(event).__name__}")


class LogNotifier:
    """Writes alerts to the log; used when SMS is not configured."""

    def notify(self, event: BookingEvent) -> None:
        logger.info("Booking alert: %s", format_message(event))


class TwilioNotifier:
    """Sends alert SMS through the Twilio Messages REST API."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        recipients: List[str],
        *,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._from_number = from_number
        self._recipients = list(recipients)
        self._transport = transport
        self._timeout = timeout

    @property
    def messages_url(self) -> str:
        return f"{TWILIO_API_BASE}/Accounts/{self._account_sid}/Messages.json"

    def notify(self, event: BookingEvent) -> int:
        """Send the alert to every recipient; returns how many were accepted."""

        body = format_message(event)
        sent = 0
        with httpx.Client(
            auth=(self._account_sid, self._auth_token),
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            for to in self._recipients:
                try:
                    response = client.post(
                        self.messages_url,
                        data={"To": to, "From": self._from_number, "Body": body},
                    )
                    response.raise_for_status()
                except httpx.HTTPError as exc:
                    logger.error("SMS to %s failed: %s", to, exc)
                    continue
                sent += 1
                logger.info("SMS sent to %s (status %d)", to, response.status_code)
        return sent


def build_notifier() -> Notifier:
    """Twilio when fully configured, otherwise log-only."""

    if TWILIO_SID and TWILIO_TOKEN and TWILIO_FROM and ALERT_TO:
        return TwilioNotifier(TWILIO_SID, TWILIO_TOKEN, TWILIO_FROM, ALERT_TO)
    logger.warning("Twilio is not configured; booking alerts will only be logged")
    return LogNotifier()


Scheduler = Callable[..., Any]


def _call_now(func: Callable[..., Any], *args: Any) -> None:
    func(*args)


class EventPublisher:
    """Hands events to a notifier without letting delivery fail the caller.

    ``schedule`` decides when delivery runs (``BackgroundTasks.add_task`` in
    the HTTP layer); by default it runs immediately.
    """

    def __init__(self, notifier: Notifier, schedule: Optional[Scheduler] = None) -> None:
        self._notifier = notifier
        self._schedule = schedule or _call_now

    def publish(self, event: BookingEvent) -> None:
        try:
            self._schedule(self._deliver, event)
        except Exception:
            logger.exception("Could not schedule %s notification", event.action)

    def _deliver(self, event: BookingEvent) -> None:
        try:
            self._notifier.notify(event)
        except Exception:
            logger.exception(
                "Notification for %s %s %s failed", event.action, event.date, event.time
            )


__all__ = [
    "BookingEvent",
    "EventPublisher",
    "LogNotifier",
    "Notifier",
    "SlotBooked",
    "SlotCancelled",
    "TwilioNotifier",
    "build_notifier",
    "format_date",
    "format_message",
]
