"""Core configuration and infrastructure helpers."""

from .config import (
    ALERT_TO,
    ALLOWED_CORS_ORIGINS,
    COLOR_PALETTE_SIZE,
    DATABASE_URL,
    DB_RESET,
    LOG_LEVEL,
    TWILIO_FROM,
    TWILIO_SID,
    TWILIO_TOKEN,
)
from .database import engine, get_session, guarded, init_db
from .errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnavailableError,
    ValidationError,
    WalkbookError,
)
from .time import now_ms, shift_iso, today_iso, utcnow

__all__ = [
    "ALERT_TO",
    "ALLOWED_CORS_ORIGINS",
    "COLOR_PALETTE_SIZE",
    "DATABASE_URL",
    "DB_RESET",
    "LOG_LEVEL",
    "TWILIO_FROM",
    "TWILIO_SID",
    "TWILIO_TOKEN",
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "UnavailableError",
    "ValidationError",
    "WalkbookError",
    "engine",
    "get_session",
    "guarded",
    "init_db",
    "now_ms",
    "shift_iso",
    "today_iso",
    "utcnow",
]
