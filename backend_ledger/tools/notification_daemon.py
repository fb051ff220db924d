"""
Ledger notification daemon: poll ledger state every 15 minutes via APScheduler.

Reads the ledger state JSON each tick, keeps notification settings in SQLite,
and logs notifications through LoggingNotificationSink. The configured
profile id is bound into the logging context for the whole run.

Usage:
  python -m backend_ledger.tools.notification_daemon            # run until SIGINT/SIGTERM
  python -m backend_ledger.tools.notification_daemon --run-now  # launch check + one tick, then exit
"""

from __future__ import annotations

import argparse
import signal
import sys
import threading
from functools import partial
from pathlib import Path

import structlog

from backend_ledger.config import get_settings
from backend_ledger.core.exceptions import LedgerError
from backend_ledger.database import get_settings_store
from backend_ledger.ledger_logging import bind_profile, unbind_profile
from backend_ledger.notifications import (
    LoggingNotificationSink,
    NotificationScheduler,
    NotificationSchedulerConfig,
)
from backend_ledger.state import load_ledger_state


def build_scheduler(db_path: Path, state_path: Path) -> NotificationScheduler:
    cfg = get_settings()
    store = get_settings_store(db_path)
    return NotificationScheduler(
        store,
        LoggingNotificationSink(),
        config=NotificationSchedulerConfig.from_ledger_config(cfg),
        state_provider=partial(load_ledger_state, state_path),
    )


def _run(args: argparse.Namespace, log: structlog.BoundLogger) -> int:
    scheduler = build_scheduler(args.db, args.state)

    try:
        scheduler.on_launch()
    except LedgerError as e:
        log.warning("notification_daemon_launch_check_failed", error=str(e))

    if args.run_now:
        log.info("notification_daemon_manual_run_start", state=str(args.state))
        try:
            request = scheduler.on_interval()
        except LedgerError as e:
            log.error("notification_daemon_manual_run_failed", error=str(e))
            return 1
        log.info(
            "notification_daemon_manual_run_end",
            shown=request.kind.value if request is not None else None,
        )
        return 0

    stop = threading.Event()

    def _handle_signal(signum, frame) -> None:
        log.info("notification_daemon_signal", signal=signum)
        stop.set()

    signal.signal(signal.SIGTERM, _handle_signal)
    scheduler.init()
    log.info("notification_daemon_started", db=str(args.db), state=str(args.state))
    try:
        while not stop.wait(1.0):
            pass
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.shutdown()
        log.info("notification_daemon_stopped")
    return 0


def main(argv: list[str] | None = None) -> int:
    cfg = get_settings()
    parser = argparse.ArgumentParser(
        description="Poll ledger state and surface payments notifications every 15 minutes."
    )
    parser.add_argument("--db", type=Path, default=cfg.db_path, help="SQLite settings database.")
    parser.add_argument("--state", type=Path, default=cfg.state_path, help="Ledger state JSON file.")
    parser.add_argument(
        "--run-now",
        action="store_true",
        help="Run the launch check and one tick immediately, then exit.",
    )
    args = parser.parse_args(argv)

    log = bind_profile(cfg.profile_id)
    try:
        return _run(args, log)
    finally:
        unbind_profile()


if __name__ == "__main__":
    sys.exit(main())
