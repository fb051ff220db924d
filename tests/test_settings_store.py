"""
Tests for the SQLite settings store (database.settings_store).
"""

from __future__ import annotations

import sqlite3

import pytest

from backend_ledger.core.exceptions import SettingsStoreError
from backend_ledger.database import (
    MigrationFlags,
    NotificationDedupState,
    SettingsStore,
    get_settings_store,
)
from backend_ledger.database.settings_store import (
    PAYMENTS_NOTIFICATIONS,
    SQLiteSettingsBackend,
)


def test_defaults_on_fresh_db(settings_store):
    assert settings_store.get_notification_state() == NotificationDedupState()
    assert settings_store.get_migration_flags() == MigrationFlags()
    settings = settings_store.get_payments_settings()
    assert settings.payments_enabled is False
    assert settings.allow_non_verified is True
    assert settings.notifications.notifications_enabled is True


def test_writes_are_reflected_in_snapshots(settings_store):
    settings_store.set_payments_enabled(True)
    settings_store.set_allow_non_verified(False)
    settings_store.set_notifications_enabled(False)
    settings_store.set_reconcile_soon_next_eligible(1_700_000_000_000)
    settings_store.set_add_funds_next_eligible(1_700_000_100_000)
    settings_store.set_try_payments_dismissed()

    state = settings_store.get_notification_state()
    assert state == NotificationDedupState(
        reconcile_soon_next_eligible=1_700_000_000_000,
        add_funds_next_eligible=1_700_000_100_000,
        try_payments_dismissed=True,
        notifications_enabled=False,
    )
    settings = settings_store.get_payments_settings()
    assert settings.payments_enabled is True
    assert settings.allow_non_verified is False


def test_values_persist_across_instances(tmp_path):
    path = tmp_path / "profile" / "ledger_settings.db"
    first = get_settings_store(path)
    first.set_migration_flags(MigrationFlags(has_upgraded_wallet=True))
    first.mark_wallet_upgrade_notified()

    second = get_settings_store(path)
    assert second.get_migration_flags() == MigrationFlags(
        is_new_install=False,
        has_upgraded_wallet=True,
        has_been_notified=True,
    )


def test_timestamp_can_be_cleared(settings_store):
    settings_store.set_add_funds_next_eligible(123)
    settings_store.set_add_funds_next_eligible(None)
    assert settings_store.get_notification_state().add_funds_next_eligible is None


def test_generic_get_set(settings_store):
    assert settings_store.get(PAYMENTS_NOTIFICATIONS) is True
    assert settings_store.get("unknown.key") is None
    settings_store.set("unknown.key", {"a": 1})
    assert settings_store.get("unknown.key") == {"a": 1}


def test_corrupt_value_falls_back_to_default(tmp_path):
    path = tmp_path / "ledger_settings.db"
    store = get_settings_store(path)
    conn = sqlite3.connect(str(path))
    conn.execute(
        "INSERT INTO settings (key, value_json, updated_at) VALUES (?, ?, ?)",
        (PAYMENTS_NOTIFICATIONS, "{not json", 0),
    )
    conn.commit()
    conn.close()
    assert store.get_notification_state().notifications_enabled is True


def test_unusable_path_raises_settings_store_error(tmp_path):
    """A directory is not a database file."""
    store = SettingsStore(SQLiteSettingsBackend(tmp_path))
    with pytest.raises(SettingsStoreError):
        store.ensure_schema()
