"""
Environment variable loading for Backend Ledger.

- LEDGER_DB_PATH: SQLite settings database (default: ledger_settings.db)
- LEDGER_STATE_PATH: JSON ledger state snapshot read each tick (default: ledger_state.json)
- LEDGER_PROFILE_ID: profile the scheduler runs for (default: default)
- LEDGER_TRY_PAYMENTS_DELAY_MS: grace period before the "try payments" upsell
- LEDGER_PAYMENTS_URL: payments panel deep link
- LEDGER_BACKUP_URL: wallet backup overlay deep link
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root: config is backend_ledger/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"


def load_ledger_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH, override=False)


def env_str(name: str, default: str) -> str:
    """Return the stripped env value, or default when unset or blank."""
    raw = (os.getenv(name) or "").strip()
    return raw or default


def env_int(name: str, default: int) -> int | None:
    """
    Return env value as int. Unset → default; unparsable → None so the caller
    can log and fall back.
    """
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return None
