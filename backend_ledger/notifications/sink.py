"""
Presentation sink contract and a logging implementation.

The real sink (browser notification bar) lives outside this package; the
scheduler only needs these four calls. LoggingNotificationSink keeps the
currently showing message per kind so a re-shown kind replaces its previous
message, and logs every call for the daemon.
"""

from __future__ import annotations

import threading
from typing import Protocol

from backend_ledger.ledger_logging import get_logger
from backend_ledger.notifications.models import NotificationKind, NotificationRequest

logger = get_logger(__name__)


class NotificationSink(Protocol):
    def show_notification(self, request: NotificationRequest) -> None: ...

    def hide_notification(self, kind: NotificationKind) -> None: ...

    def open_panel(self, url: str, window_id: int) -> None: ...

    def on_bitcoin_to_bat_notified(self) -> None: ...


class LoggingNotificationSink:
    """Sink that records what is showing and logs instead of rendering."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._showing: dict[NotificationKind, NotificationRequest] = {}

    @property
    def showing(self) -> dict[NotificationKind, NotificationRequest]:
        with self._lock:
            return dict(self._showing)

    def show_notification(self, request: NotificationRequest) -> None:
        with self._lock:
            replaced = request.kind in self._showing
            self._showing[request.kind] = request
        logger.info(
            "ledger_notification_presented",
            kind=request.kind.value,
            replaced=replaced,
            buttons=[b.label for b in request.buttons],
        )

    def hide_notification(self, kind: NotificationKind) -> None:
        with self._lock:
            removed = self._showing.pop(kind, None) is not None
        logger.info("ledger_notification_hidden", kind=kind.value, was_showing=removed)

    def open_panel(self, url: str, window_id: int) -> None:
        logger.info("ledger_panel_requested", url=url, window_id=window_id)

    def on_bitcoin_to_bat_notified(self) -> None:
        logger.info("ledger_wallet_upgrade_notified")
