"""
Main entrypoint: ledger notification daemon for one browser profile.

Polls the ledger state file every 15 minutes and surfaces payments
notifications; settings persist in SQLite between runs.

Env: LEDGER_DB_PATH, LEDGER_STATE_PATH, LEDGER_PROFILE_ID, LEDGER_TRY_PAYMENTS_DELAY_MS,
LOG_LEVEL, LOG_FORMAT.
"""

import sys

# Configure structured JSON logging before other imports that may log
from backend_ledger.ledger_logging import get_logger

logger = get_logger("main")


def main() -> int:
    from backend_ledger.tools.notification_daemon import main as daemon_main

    logger.info("main_starting")
    return daemon_main()


if __name__ == "__main__":
    sys.exit(main())
