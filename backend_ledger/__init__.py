"""
Backend Ledger: notification scheduling and publisher eligibility for the
browser payments ledger.

Polls wallet and reconciliation state on a fixed cadence, decides which (if any)
payments notification to surface, and evaluates which visited publishers
qualify for automatic contribution. Presentation, IPC and the reconciliation
protocol itself live outside this package.
"""

__version__ = "0.1.0"
