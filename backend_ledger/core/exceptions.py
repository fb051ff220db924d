"""
Application-level exceptions.

Raised by the persistence and state-loading layers. The scheduler's timer job
catches them at its boundary so a failed tick never stops the polling loop;
direct callers see them unchanged.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for all backend_ledger errors."""


class StateLoadError(LedgerError):
    """Ledger state file is missing, unreadable, or not valid JSON."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot load ledger state from {path}: {reason}")
        self.path = path
        self.reason = reason


class SettingsStoreError(LedgerError):
    """Settings database could not be read or written."""
