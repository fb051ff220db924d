"""
Settings persistence for payments toggles, notification dedup state and migration flags.

Uses SQLite; designed so the backend can be swapped via a different
SettingsBackend implementation. All access goes through the abstract interface.
Values are stored JSON-encoded in a single key/value table so new settings
need no schema change.
"""

from __future__ import annotations

import json
import sqlite3
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator

from backend_ledger.core.exceptions import SettingsStoreError
from backend_ledger.database.models import (
    MigrationFlags,
    NotificationDedupState,
    PaymentsSettings,
)
from backend_ledger.ledger_logging import get_logger

logger = get_logger(__name__)

# Setting keys (same names as the browser's settings constants)
PAYMENTS_ENABLED = "payments.enabled"
PAYMENTS_NOTIFICATIONS = "payments.notifications"
PAYMENTS_ALLOW_NON_VERIFIED = "payments.allow-non-verified-publishers"
PAYMENTS_NOTIFICATION_RECONCILE_SOON_TIMESTAMP = "payments.notification-reconcile-soon-timestamp"
PAYMENTS_NOTIFICATION_ADD_FUNDS_TIMESTAMP = "payments.notification-add-funds-timestamp"
PAYMENTS_NOTIFICATION_TRY_PAYMENTS_DISMISSED = "payments.notificationTryPaymentsDismissed"
MIGRATION_IS_NEW_INSTALL = "migrations.isNewInstall"
MIGRATION_HAS_UPGRADED_WALLET = "migrations.btcToBatUpgraded"
MIGRATION_HAS_BEEN_NOTIFIED = "migrations.btcToBatNotified"

DEFAULTS: dict[str, Any] = {
    PAYMENTS_ENABLED: False,
    PAYMENTS_NOTIFICATIONS: True,
    PAYMENTS_ALLOW_NON_VERIFIED: True,
    PAYMENTS_NOTIFICATION_RECONCILE_SOON_TIMESTAMP: None,
    PAYMENTS_NOTIFICATION_ADD_FUNDS_TIMESTAMP: None,
    PAYMENTS_NOTIFICATION_TRY_PAYMENTS_DISMISSED: False,
    MIGRATION_IS_NEW_INSTALL: False,
    MIGRATION_HAS_UPGRADED_WALLET: False,
    MIGRATION_HAS_BEEN_NOTIFIED: False,
}

# -----------------------------------------------------------------------------
# Schema (SQLite).
# -----------------------------------------------------------------------------

SCHEMA_SETTINGS = """
CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value_json TEXT,
    updated_at INTEGER
);
"""


# -----------------------------------------------------------------------------
# Abstract backend
# -----------------------------------------------------------------------------


class SettingsBackend(ABC):
    """Abstract key/value persistence for settings."""

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create tables if they do not exist."""
        ...

    @abstractmethod
    def get_values(self, keys: Iterable[str]) -> dict[str, Any]:
        """Return decoded values for the keys that are stored; absent keys are omitted."""
        ...

    @abstractmethod
    def set_value(self, key: str, value: Any) -> None:
        """Insert or replace one setting."""
        ...


# -----------------------------------------------------------------------------
# SQLite backend
# -----------------------------------------------------------------------------


class SQLiteSettingsBackend(SettingsBackend):
    """SQLite implementation; single file, one connection per operation."""

    def __init__(self, path: str | Path, *, timeout_sec: float = 5.0) -> None:
        self._path = Path(path)
        self._timeout_sec = timeout_sec

    def _connect(self) -> sqlite3.Connection:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._path), timeout=self._timeout_sec)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode = WAL")
        return conn

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        try:
            conn = self._connect()
        except (sqlite3.Error, OSError) as e:
            raise SettingsStoreError(f"cannot open settings db {self._path}: {e}") from e
        try:
            cur = conn.cursor()
            yield cur
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise SettingsStoreError(f"settings db {self._path}: {e}") from e
        finally:
            conn.close()

    def ensure_schema(self) -> None:
        with self._cursor() as cur:
            cur.executescript(SCHEMA_SETTINGS)

    def get_values(self, keys: Iterable[str]) -> dict[str, Any]:
        keys = list(keys)
        if not keys:
            return {}
        placeholders = ",".join("?" * len(keys))
        with self._cursor() as cur:
            cur.execute(
                f"SELECT key, value_json FROM settings WHERE key IN ({placeholders})",
                keys,
            )
            rows = cur.fetchall()
        out: dict[str, Any] = {}
        for row in rows:
            try:
                out[row["key"]] = json.loads(row["value_json"]) if row["value_json"] is not None else None
            except json.JSONDecodeError:
                logger.warning("settings_value_corrupt", key=row["key"])
        return out

    def set_value(self, key: str, value: Any) -> None:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO settings (key, value_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value_json = excluded.value_json,
                    updated_at = excluded.updated_at
                """,
                (key, json.dumps(value), int(time.time())),
            )


class SettingsStore:
    """
    Typed settings access: payments toggles, notification dedup state, migration flags.

    Uses a SettingsBackend (SQLite by default). Reads return immutable snapshots;
    writes go straight to the backend.
    """

    def __init__(self, backend: SettingsBackend) -> None:
        self._backend = backend

    def ensure_schema(self) -> None:
        self._backend.ensure_schema()

    def _read(self, keys: Iterable[str]) -> dict[str, Any]:
        keys = list(keys)
        stored = self._backend.get_values(keys)
        return {k: stored.get(k, DEFAULTS.get(k)) for k in keys}

    def get(self, key: str) -> Any:
        return self._read([key])[key]

    def set(self, key: str, value: Any) -> None:
        self._backend.set_value(key, value)
        logger.debug("setting_changed", key=key, value=value)

    # --- Snapshots ---

    def get_notification_state(self) -> NotificationDedupState:
        values = self._read(
            (
                PAYMENTS_NOTIFICATION_RECONCILE_SOON_TIMESTAMP,
                PAYMENTS_NOTIFICATION_ADD_FUNDS_TIMESTAMP,
                PAYMENTS_NOTIFICATION_TRY_PAYMENTS_DISMISSED,
                PAYMENTS_NOTIFICATIONS,
            )
        )
        return NotificationDedupState(
            reconcile_soon_next_eligible=values[PAYMENTS_NOTIFICATION_RECONCILE_SOON_TIMESTAMP],
            add_funds_next_eligible=values[PAYMENTS_NOTIFICATION_ADD_FUNDS_TIMESTAMP],
            try_payments_dismissed=bool(values[PAYMENTS_NOTIFICATION_TRY_PAYMENTS_DISMISSED]),
            notifications_enabled=bool(values[PAYMENTS_NOTIFICATIONS]),
        )

    def get_migration_flags(self) -> MigrationFlags:
        values = self._read(
            (MIGRATION_IS_NEW_INSTALL, MIGRATION_HAS_UPGRADED_WALLET, MIGRATION_HAS_BEEN_NOTIFIED)
        )
        return MigrationFlags(
            is_new_install=bool(values[MIGRATION_IS_NEW_INSTALL]),
            has_upgraded_wallet=bool(values[MIGRATION_HAS_UPGRADED_WALLET]),
            has_been_notified=bool(values[MIGRATION_HAS_BEEN_NOTIFIED]),
        )

    def get_payments_settings(self) -> PaymentsSettings:
        values = self._read((PAYMENTS_ENABLED, PAYMENTS_ALLOW_NON_VERIFIED))
        return PaymentsSettings(
            payments_enabled=bool(values[PAYMENTS_ENABLED]),
            allow_non_verified=bool(values[PAYMENTS_ALLOW_NON_VERIFIED]),
            notifications=self.get_notification_state(),
            migration=self.get_migration_flags(),
        )

    # --- Writes ---

    def set_payments_enabled(self, enabled: bool) -> None:
        self.set(PAYMENTS_ENABLED, bool(enabled))

    def set_notifications_enabled(self, enabled: bool) -> None:
        self.set(PAYMENTS_NOTIFICATIONS, bool(enabled))

    def set_allow_non_verified(self, allowed: bool) -> None:
        self.set(PAYMENTS_ALLOW_NON_VERIFIED, bool(allowed))

    def set_reconcile_soon_next_eligible(self, timestamp: int | None) -> None:
        self.set(PAYMENTS_NOTIFICATION_RECONCILE_SOON_TIMESTAMP, timestamp)

    def set_add_funds_next_eligible(self, timestamp: int | None) -> None:
        self.set(PAYMENTS_NOTIFICATION_ADD_FUNDS_TIMESTAMP, timestamp)

    def set_try_payments_dismissed(self, dismissed: bool = True) -> None:
        self.set(PAYMENTS_NOTIFICATION_TRY_PAYMENTS_DISMISSED, bool(dismissed))

    def set_migration_flags(self, flags: MigrationFlags) -> None:
        self.set(MIGRATION_IS_NEW_INSTALL, flags.is_new_install)
        self.set(MIGRATION_HAS_UPGRADED_WALLET, flags.has_upgraded_wallet)
        self.set(MIGRATION_HAS_BEEN_NOTIFIED, flags.has_been_notified)

    def mark_wallet_upgrade_notified(self) -> None:
        self.set(MIGRATION_HAS_BEEN_NOTIFIED, True)


def get_settings_store(path: str | Path | None = None) -> SettingsStore:
    """
    Return a SettingsStore backed by SQLite, schema ensured.

    path: SQLite file (one per profile). Default: "ledger_settings.db" in cwd.
    """
    if path is None:
        path = Path("ledger_settings.db")
    store = SettingsStore(SQLiteSettingsBackend(path))
    store.ensure_schema()
    return store
