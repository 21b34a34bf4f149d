"""Database configuration and session helpers."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Iterator, TypeVar

from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, SQLModel, create_engine

from .config import DATA_DIR, DATABASE_URL
from .errors import UnavailableError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def make_engine(url: str) -> Engine:
    """Create an engine; SQLite connections are shared across worker threads."""

    if url.startswith("sqlite"):
        if url.startswith(f"sqlite:///{DATA_DIR}"):
            DATA_DIR.mkdir(parents=True, exist_ok=True)
        return create_engine(
            url, connect_args={"check_same_thread": False, "timeout": 30}
        )
    return create_engine(url, pool_pre_ping=True)


engine = make_engine(DATABASE_URL)


def init_db(bind: Engine, reset: bool = False) -> None:
    """Create every registered table, optionally dropping them first."""

    if reset:
        SQLModel.metadata.drop_all(bind)
        logger.info("Dropped all tables")
    SQLModel.metadata.create_all(bind)
    logger.info("Database tables ready")


def get_session() -> Iterator[Session]:
    """FastAPI dependency that yields a database session."""

    with Session(engine) as session:
        yield session


def guarded(func: F) -> F:
    """Translate driver-level outages into ``UnavailableError``.

    The wrapped method's owner must expose its session as ``_session``; it is
    rolled back before the error is raised.
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except OperationalError as exc:
            self._session.rollback()
            logger.error("Storage unavailable during %s: %s", func.__qualname__, exc)
            raise UnavailableError("Storage is temporarily unavailable") from exc

    return wrapper  # type: ignore[return-value]


__all__ = ["engine", "get_session", "guarded", "init_db", "make_engine"]
