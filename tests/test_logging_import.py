"""
Test that ledger_logging can be imported without circular import and logger works.
"""

from __future__ import annotations

import structlog


def test_logging_import():
    """Import get_logger from ledger_logging and use the logger."""
    from backend_ledger.ledger_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")


def test_bind_profile_uses_context():
    """profile_id lives in the structlog context until unbound."""
    from backend_ledger.ledger_logging import bind_profile, unbind_profile

    logger = bind_profile("work")
    try:
        assert structlog.contextvars.get_contextvars()["profile_id"] == "work"
        logger.info("test_message_with_profile")
    finally:
        unbind_profile()
    assert "profile_id" not in structlog.contextvars.get_contextvars()
