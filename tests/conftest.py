"""Shared test fixtures and configuration.

Pins environment variables before any walkbook import so the module-level
engine stays in memory and SMS stays disabled, and provides a fresh
file-backed SQLite database per test.
"""

import os

# Patch env vars BEFORE any walkbook imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("COLOR_PALETTE_SIZE", "10")
os.environ.setdefault("LOG_LEVEL", "WARNING")
for _var in ("TWILIO_SID", "TWILIO_TOKEN", "TWILIO_FROM", "ALERT_TO"):
    os.environ.pop(_var, None)

import pytest
from sqlmodel import Session


class RecordingNotifier:
    """Notifier double that keeps every delivered event."""

    def __init__(self):
        self.events = []

    def notify(self, event):
        self.events.append(event)


@pytest.fixture
def engine(tmp_path):
    """Engine on a temporary SQLite file with all tables created."""
    from walkbook.core.database import init_db, make_engine

    eng = make_engine(f"sqlite:///{tmp_path / 'walkbook.db'}")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def slot_store(session):
    from walkbook.services import SlotStore
    return SlotStore(session)


@pytest.fixture
def walker_registry(session):
    from walkbook.services import WalkerRegistry
    return WalkerRegistry(session)


@pytest.fixture
def leaderboard(session, walker_registry):
    from walkbook.services import Leaderboard
    return Leaderboard(session, walker_registry)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def booking_service(slot_store, walker_registry, notifier):
    from walkbook.services import BookingService, EventPublisher
    return BookingService(slot_store, walker_registry, EventPublisher(notifier))


@pytest.fixture
def client(engine, notifier):
    """TestClient whose requests use the per-test database and notifier."""
    from fastapi.testclient import TestClient

    from walkbook.api.deps import get_notifier
    from walkbook.app import app
    from walkbook.core import get_session

    def _session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()
