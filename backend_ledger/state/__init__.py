"""
Ledger state snapshots: wallet info, publishers, synopsis options, site settings.

Immutable views read by the notification scheduler and eligibility evaluator.
"""

from backend_ledger.state.loader import load_ledger_state
from backend_ledger.state.models import (
    LedgerState,
    PublisherOptions,
    PublisherRecord,
    SiteSettings,
    SynopsisOptions,
    Transaction,
    WalletSnapshot,
)

__all__ = [
    "LedgerState",
    "PublisherOptions",
    "PublisherRecord",
    "SiteSettings",
    "SynopsisOptions",
    "Transaction",
    "WalletSnapshot",
    "load_ledger_state",
]
