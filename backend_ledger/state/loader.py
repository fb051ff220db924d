"""
Load a LedgerState snapshot from a JSON file.

The file mirrors the browser's ledger state: ledgerInfo, publishers,
synopsisOptions, siteSettings and firstRunTimestamp. The daemon re-reads it
on every tick so the scheduler always sees the latest wallet info.
"""

from __future__ import annotations

import json
from pathlib import Path

from backend_ledger.core.exceptions import StateLoadError
from backend_ledger.ledger_logging import get_logger
from backend_ledger.state.models import LedgerState

logger = get_logger(__name__)


def load_ledger_state(path: str | Path) -> LedgerState:
    """
    Read and parse the state file.

    Fields of the wrong type read as absent; StateLoadError is raised only when
    the file is missing, is not a JSON object, or cannot be parsed at all.
    """
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except OSError as e:
        raise StateLoadError(str(p), str(e)) from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StateLoadError(str(p), f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise StateLoadError(str(p), "top-level value must be an object")
    try:
        state = LedgerState.from_dict(data)
    except (TypeError, ValueError, AttributeError) as e:
        raise StateLoadError(str(p), f"malformed state: {e}") from e
    logger.debug(
        "ledger_state_loaded",
        path=str(p),
        publishers=len(state.publishers),
        has_reconcile_stamp=state.wallet.reconcile_timestamp is not None,
    )
    return state
