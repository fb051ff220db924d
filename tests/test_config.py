"""
Tests for environment-driven configuration (config.settings).
"""

from __future__ import annotations

from pathlib import Path

import pytest

from backend_ledger.config import get_settings, load_config
from backend_ledger.config.settings import (
    BACKUP_PANEL_URL,
    DEFAULT_TRY_PAYMENTS_DELAY_MS,
    PAYMENTS_PANEL_URL,
)
from backend_ledger.notifications import NotificationSchedulerConfig

_VARS = (
    "LEDGER_DB_PATH",
    "LEDGER_STATE_PATH",
    "LEDGER_PROFILE_ID",
    "LEDGER_TRY_PAYMENTS_DELAY_MS",
    "LEDGER_PAYMENTS_URL",
    "LEDGER_BACKUP_URL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    cfg = load_config()
    assert cfg.db_path == Path("ledger_settings.db")
    assert cfg.profile_id == "default"
    assert cfg.try_payments_delay_ms == DEFAULT_TRY_PAYMENTS_DELAY_MS
    assert cfg.payments_url == PAYMENTS_PANEL_URL
    assert cfg.backup_url == BACKUP_PANEL_URL


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("LEDGER_DB_PATH", str(tmp_path / "s.db"))
    monkeypatch.setenv("LEDGER_PROFILE_ID", "work")
    monkeypatch.setenv("LEDGER_TRY_PAYMENTS_DELAY_MS", "60000")
    monkeypatch.setenv("LEDGER_BACKUP_URL", "about:preferences#payments?backup")
    cfg = get_settings()
    assert cfg.db_path == tmp_path / "s.db"
    assert cfg.profile_id == "work"
    assert cfg.try_payments_delay_ms == 60000
    assert cfg.backup_url == "about:preferences#payments?backup"
    assert get_settings() is cfg


@pytest.mark.parametrize("raw", ["ten days", "-5"])
def test_bad_delay_falls_back(monkeypatch, raw):
    monkeypatch.setenv("LEDGER_TRY_PAYMENTS_DELAY_MS", raw)
    assert load_config().try_payments_delay_ms == DEFAULT_TRY_PAYMENTS_DELAY_MS


def test_scheduler_config_from_ledger_config(monkeypatch):
    monkeypatch.setenv("LEDGER_PROFILE_ID", "p2")
    sched_cfg = NotificationSchedulerConfig.from_ledger_config(load_config())
    assert sched_cfg.profile_id == "p2"
    assert sched_cfg.payments_url == PAYMENTS_PANEL_URL


def test_backup_url_reaches_scheduler(monkeypatch):
    """The backup deep link is configurable like the payments panel link."""
    monkeypatch.setenv("LEDGER_BACKUP_URL", "about:preferences#payments?backup")
    sched_cfg = NotificationSchedulerConfig.from_ledger_config(load_config())
    assert sched_cfg.backup_url == "about:preferences#payments?backup"
