"""
Application settings and environment configuration.

Builds a frozen LedgerConfig from environment variables (after loading .env)
so the daemon, settings store and scheduler share one source of truth.
Values the scheduler treats as fixed (polling cadence, snooze windows) are
module constants in notifications.scheduler, not configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from backend_ledger.config.env import env_int, env_str, load_ledger_env
from backend_ledger.ledger_logging import get_logger

logger = get_logger(__name__)

DEFAULT_DB_PATH = "ledger_settings.db"
DEFAULT_STATE_PATH = "ledger_state.json"
DEFAULT_PROFILE_ID = "default"
# appConfig.payments.delayNotificationTryPayments: 10 days after first run
DEFAULT_TRY_PAYMENTS_DELAY_MS = 10 * 24 * 60 * 60 * 1000
PAYMENTS_PANEL_URL = "about:preferences#payments"
BACKUP_PANEL_URL = "about:preferences#payments?ledgerBackupOverlayVisible"


@dataclass(frozen=True)
class LedgerConfig:
    """Typed service configuration."""

    db_path: Path = Path(DEFAULT_DB_PATH)
    state_path: Path = Path(DEFAULT_STATE_PATH)
    profile_id: str = DEFAULT_PROFILE_ID
    try_payments_delay_ms: int = DEFAULT_TRY_PAYMENTS_DELAY_MS
    """Install age (ms) before the disabled-payments upsell may show."""
    payments_url: str = PAYMENTS_PANEL_URL
    backup_url: str = BACKUP_PANEL_URL


def load_config() -> LedgerConfig:
    """Read LedgerConfig from the environment. Bad numeric values fall back to defaults."""
    load_ledger_env()
    delay = env_int("LEDGER_TRY_PAYMENTS_DELAY_MS", DEFAULT_TRY_PAYMENTS_DELAY_MS)
    if delay is None or delay < 0:
        logger.warning(
            "ledger_config_invalid_value",
            name="LEDGER_TRY_PAYMENTS_DELAY_MS",
            fallback=DEFAULT_TRY_PAYMENTS_DELAY_MS,
        )
        delay = DEFAULT_TRY_PAYMENTS_DELAY_MS
    return LedgerConfig(
        db_path=Path(env_str("LEDGER_DB_PATH", DEFAULT_DB_PATH)),
        state_path=Path(env_str("LEDGER_STATE_PATH", DEFAULT_STATE_PATH)),
        profile_id=env_str("LEDGER_PROFILE_ID", DEFAULT_PROFILE_ID),
        try_payments_delay_ms=delay,
        payments_url=env_str("LEDGER_PAYMENTS_URL", PAYMENTS_PANEL_URL),
        backup_url=env_str("LEDGER_BACKUP_URL", BACKUP_PANEL_URL),
    )


@lru_cache(maxsize=1)
def get_settings() -> LedgerConfig:
    """
    Return the current application settings (cached after first call).

    Tests that change the environment call get_settings.cache_clear().
    """
    return load_config()
