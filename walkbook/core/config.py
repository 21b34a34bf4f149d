"""Application settings and environment helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

from dotenv import load_dotenv

load_dotenv(override=False)

_PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc
    if value < 1:
        raise RuntimeError(f"{name} must be at least 1")
    return value


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


# Storage --------------------------------------------------------------------
DATA_DIR = _PROJECT_ROOT / "data"
DATABASE_URL = os.getenv("DATABASE_URL") or f"sqlite:///{DATA_DIR / 'walkbook.db'}"
DB_RESET = _env_bool("DB_RESET", False)


# CORS -------------------------------------------------------------------------
# Each variable is a comma-separated list; DEV_ORIGINS="" disables the
# Vite dev-server defaults.
_DEFAULT_DEV_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"

ALLOWED_CORS_ORIGINS = _unique(
    _split_csv(os.getenv("FRONTEND_ORIGIN"))
    + _split_csv(os.getenv("ADDITIONAL_ALLOWED_ORIGINS"))
    + _split_csv(os.getenv("DEV_ORIGINS", _DEFAULT_DEV_ORIGINS))
)


# Scheduling -------------------------------------------------------------------
COLOR_PALETTE_SIZE = _env_positive_int("COLOR_PALETTE_SIZE", 10)


# SMS alerts -------------------------------------------------------------------
TWILIO_SID = os.getenv("TWILIO_SID", "")
TWILIO_TOKEN = os.getenv("TWILIO_TOKEN", "")
TWILIO_FROM = os.getenv("TWILIO_FROM", "")
ALERT_TO = _split_csv(os.getenv("ALERT_TO"))


# Runtime behaviour ------------------------------------------------------------
LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()


__all__ = [
    "ALERT_TO",
    "ALLOWED_CORS_ORIGINS",
    "COLOR_PALETTE_SIZE",
    "DATABASE_URL",
    "DATA_DIR",
    "DB_RESET",
    "LOG_LEVEL",
    "TWILIO_FROM",
    "TWILIO_SID",
    "TWILIO_TOKEN",
]
