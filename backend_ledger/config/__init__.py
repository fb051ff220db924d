"""
Configuration management for Backend Ledger.

Loads settings from environment variables and an optional .env file.
Exposes a single source of truth for service configuration.
"""

from backend_ledger.config.settings import LedgerConfig, get_settings, load_config  # noqa: F401

__all__ = ["LedgerConfig", "get_settings", "load_config"]
