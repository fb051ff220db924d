"""
Tests for the notification daemon CLI (tools.notification_daemon) in --run-now mode.
"""

from __future__ import annotations

import json

from backend_ledger.config import get_settings
from backend_ledger.database import get_settings_store
from backend_ledger.tools.notification_daemon import build_scheduler, main


def test_run_now_with_state_file(tmp_path):
    state = tmp_path / "ledger_state.json"
    state.write_text(json.dumps({"ledgerInfo": {"balance": "1"}}), encoding="utf-8")
    db = tmp_path / "ledger_settings.db"
    get_settings.cache_clear()

    assert main(["--db", str(db), "--state", str(state), "--run-now"]) == 0
    assert db.exists()


def test_run_now_missing_state_fails(tmp_path):
    get_settings.cache_clear()
    code = main(["--db", str(tmp_path / "s.db"), "--state", str(tmp_path / "missing.json"), "--run-now"])
    assert code == 1


def test_build_scheduler_reads_state_each_tick(tmp_path):
    """Try-payments shows once the install is older than the configured delay."""
    state = tmp_path / "ledger_state.json"
    state.write_text(json.dumps({"firstRunTimestamp": 1}), encoding="utf-8")
    db = tmp_path / "ledger_settings.db"
    get_settings.cache_clear()

    scheduler = build_scheduler(db, state)
    request = scheduler.on_interval()
    assert request is not None
    assert request.kind.value == "try_payments"

    get_settings_store(db).set_try_payments_dismissed()
    assert scheduler.on_interval() is None
    scheduler.shutdown()


def test_run_now_survives_wrong_typed_state(tmp_path):
    """A state file with wrong-typed fields is read as partial state, not a crash."""
    state = tmp_path / "ledger_state.json"
    state.write_text(
        json.dumps({"ledgerInfo": "oops", "publishers": {"a.com": {"scores": {"concave": "n/a"}}}}),
        encoding="utf-8",
    )
    get_settings.cache_clear()

    assert main(["--db", str(tmp_path / "s.db"), "--state", str(state), "--run-now"]) == 0


def test_profile_bound_only_for_the_run(tmp_path, monkeypatch):
    import structlog

    from backend_ledger.tools import notification_daemon

    seen = {}

    def fake_run(args, log):
        seen.update(structlog.contextvars.get_contextvars())
        return 0

    monkeypatch.setenv("LEDGER_PROFILE_ID", "work")
    monkeypatch.setattr(notification_daemon, "_run", fake_run)
    get_settings.cache_clear()
    try:
        assert notification_daemon.main(["--run-now"]) == 0
    finally:
        get_settings.cache_clear()
    assert seen["profile_id"] == "work"
    assert "profile_id" not in structlog.contextvars.get_contextvars()
