"""
Settings persistence: payments toggles, notification dedup state, migration flags.

SQLite via SettingsStore and get_settings_store(); backend is swappable.
"""

from backend_ledger.database.models import (
    MigrationFlags,
    NotificationDedupState,
    PaymentsSettings,
)
from backend_ledger.database.settings_store import (
    SettingsBackend,
    SettingsStore,
    SQLiteSettingsBackend,
    get_settings_store,
)

__all__ = [
    "MigrationFlags",
    "NotificationDedupState",
    "PaymentsSettings",
    "SettingsBackend",
    "SettingsStore",
    "SQLiteSettingsBackend",
    "get_settings_store",
]
