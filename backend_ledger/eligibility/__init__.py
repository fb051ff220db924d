"""
Publisher eligibility evaluator: pure predicates over a LedgerState snapshot.
"""

from backend_ledger.eligibility.evaluator import (
    VisibilityResult,
    blocked,
    contribute,
    eligible,
    get_host_pattern,
    sticky,
    visible,
)

__all__ = [
    "VisibilityResult",
    "blocked",
    "contribute",
    "eligible",
    "get_host_pattern",
    "sticky",
    "visible",
]
