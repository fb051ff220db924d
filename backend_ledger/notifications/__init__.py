"""
Ledger notifications: polling scheduler, decision rules, messages, sink contract.
"""

from backend_ledger.notifications.models import (
    ActiveWindow,
    NotificationButton,
    NotificationKind,
    NotificationOptions,
    NotificationRequest,
)
from backend_ledger.notifications.scheduler import (
    POLLING_INTERVAL_MS,
    NotificationScheduler,
    NotificationSchedulerConfig,
    WindowDecision,
    evaluate_reconcile_window,
)
from backend_ledger.notifications.sink import LoggingNotificationSink, NotificationSink

__all__ = [
    "ActiveWindow",
    "LoggingNotificationSink",
    "NotificationButton",
    "NotificationKind",
    "NotificationOptions",
    "NotificationRequest",
    "NotificationScheduler",
    "NotificationSchedulerConfig",
    "NotificationSink",
    "POLLING_INTERVAL_MS",
    "WindowDecision",
    "evaluate_reconcile_window",
]
