"""
Core: cross-cutting exceptions shared by the store, state loader and scheduler.
"""

from backend_ledger.core.exceptions import LedgerError, SettingsStoreError, StateLoadError

__all__ = ["LedgerError", "SettingsStoreError", "StateLoadError"]
