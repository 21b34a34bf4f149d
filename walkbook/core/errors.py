"""Domain error taxonomy.

Every failure a caller can observe maps to one subclass with a stable
``code`` so clients can tell "slot just taken" apart from "not your booking".
"""

from __future__ import annotations


class WalkbookError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def as_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code}


class ValidationError(WalkbookError):
    """Malformed input; raised before any store access."""

    code = "validation_error"
    status_code = 400


class ConflictError(WalkbookError):
    """The (date, time) slot already holds a booking."""

    code = "slot_taken"
    status_code = 409


class NotFoundError(WalkbookError):
    code = "not_found"
    status_code = 404


class ForbiddenError(WalkbookError):
    """Cancellation attempted under a name that does not own the slot."""

    code = "forbidden"
    status_code = 403


class UnavailableError(WalkbookError):
    """The backing store could not be reached. Safe to retry."""

    code = "store_unavailable"
    status_code = 503


__all__ = [
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "UnavailableError",
    "ValidationError",
    "WalkbookError",
]
