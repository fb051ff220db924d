"""
Notification value objects exchanged with the presentation sink.

A NotificationRequest is identified by its kind: the sink shows at most one
message per kind, and a new request of the same kind replaces the old one.
Buttons are positional; response handling keys off the index.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NotificationKind(str, Enum):
    TRY_PAYMENTS = "try_payments"
    ADD_FUNDS = "add_funds"
    REVIEW_PUBLISHERS = "review_publishers"
    PAYMENT_DONE = "payment_done"
    WALLET_UPGRADED = "wallet_upgraded"


@dataclass(frozen=True)
class NotificationButton:
    label: str
    is_primary: bool = False


@dataclass(frozen=True)
class NotificationOptions:
    persistent: bool = False
    style: str = "greetingStyle"
    advanced_link: str | None = None
    """Optional "learn more" link shown under the message."""
    advanced_text: str | None = None


@dataclass(frozen=True)
class NotificationRequest:
    kind: NotificationKind
    greeting: str
    message: str
    buttons: tuple[NotificationButton, ...] = ()
    options: NotificationOptions = field(default_factory=NotificationOptions)
    source: str = "ledger"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "from": self.source,
            "kind": self.kind.value,
            "greeting": self.greeting,
            "message": self.message,
            "buttons": [
                {"text": b.label, **({"className": "primaryButton"} if b.is_primary else {})}
                for b in self.buttons
            ],
            "options": {
                "style": self.options.style,
                "persist": self.options.persistent,
            },
        }
        if self.options.advanced_link:
            out["options"]["advancedLink"] = self.options.advanced_link
            out["options"]["advancedText"] = self.options.advanced_text
        return out


@dataclass(frozen=True)
class ActiveWindow:
    """Browser window the user responded from; target for panel navigation."""

    id: int
