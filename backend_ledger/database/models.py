"""
Domain models for persisted settings.

Notification dedup state, migration flags, and the per-tick payments settings
snapshot. Used by the settings store; no ORM coupling so backends stay swappable.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class NotificationDedupState:
    """Snooze/dedup timestamps and toggles. One per profile; survives restarts."""

    reconcile_soon_next_eligible: int | None = None
    """Epoch ms after which "review publishers" may show again; None = eligible now."""
    add_funds_next_eligible: int | None = None
    """Epoch ms after which "add funds" may show again; None = eligible now."""
    try_payments_dismissed: bool = False
    notifications_enabled: bool = True


@dataclass(frozen=True)
class MigrationFlags:
    """Wallet-upgrade bookkeeping; has_been_notified flips once, never back."""

    is_new_install: bool = False
    has_upgraded_wallet: bool = False
    has_been_notified: bool = False


@dataclass(frozen=True)
class PaymentsSettings:
    """General settings read once per tick, plus notification state and migration flags."""

    payments_enabled: bool = False
    allow_non_verified: bool = True
    notifications: NotificationDedupState = field(default_factory=NotificationDedupState)
    migration: MigrationFlags = field(default_factory=MigrationFlags)
