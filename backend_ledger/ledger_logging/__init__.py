"""
Structured logging for Backend Ledger.

JSON logs with timestamp, event_type, notification kind and profile; the
profile id is bound once per daemon run through structlog contextvars.
Use get_logger() in all modules for aggregation-friendly output.
"""

from backend_ledger.ledger_logging.logger import bind_profile, get_logger, unbind_profile

__all__ = ["bind_profile", "get_logger", "unbind_profile"]
