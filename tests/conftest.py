"""
Pytest fixtures for ledger tests. Uses a temporary SQLite settings DB and a
paused APScheduler so timer jobs can be inspected without ever firing.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from apscheduler.schedulers.background import BackgroundScheduler
from pytz import utc

from backend_ledger.database import get_settings_store
from backend_ledger.notifications import NotificationScheduler

# 2023-11-14T22:13:20Z
NOW = 1_700_000_000_000


class FakeClock:
    """Settable epoch-ms clock."""

    def __init__(self, now: int = NOW) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def settings_store(tmp_path):
    """Fresh SQLite settings store per test."""
    return get_settings_store(tmp_path / "ledger_settings.db")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sink():
    return MagicMock()


@pytest.fixture
def aps():
    """Started-but-paused BackgroundScheduler: jobs are real, nothing fires."""
    scheduler = BackgroundScheduler(timezone=utc)
    scheduler.start(paused=True)
    yield scheduler
    scheduler.shutdown(wait=False)


@pytest.fixture
def notification_scheduler(settings_store, sink, clock, aps):
    return NotificationScheduler(settings_store, sink, scheduler=aps, clock=clock)
