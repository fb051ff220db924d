"""
English message catalogue and request builders for each notification kind.

Button order is part of the contract with the scheduler's response handler:
index 0 is always the leftmost button.
"""

from __future__ import annotations

from decimal import Decimal

from backend_ledger.notifications.models import (
    NotificationButton,
    NotificationKind,
    NotificationOptions,
    NotificationRequest,
)

HELLO = "Hello!"
TRY_PAYMENTS = "Would you like to try Brave Payments and support the sites you visit?"
ADD_FUNDS = (
    "Your Brave Payments account is waiting for a deposit. "
    "Add funds now so your next contribution can be made."
)
RECONCILIATION = (
    "Brave Payments will contribute to your favorite sites soon. "
    "Review the list of sites before the next contribution."
)
PAYMENT_DONE = "Your contribution of {amount} {currency} has been made. Thanks for supporting the sites you love!"
WALLET_CONVERTED_TO_BAT = (
    "Your wallet has been upgraded to BAT. "
    "Please back up your new wallet so you can restore it later."
)
WALLET_LEARN_MORE_URL = "https://brave.com/faq-payments/#brave-payments"

BUTTON_NO_THANKS = "No thanks"
BUTTON_TRY_PAYMENTS_YES = "Yes, tell me more"
BUTTON_TURN_OFF = "Turn off notifications"
BUTTON_DISMISS = "Dismiss"
BUTTON_LATER = "Later"
BUTTON_ADD_FUNDS = "Add funds"
BUTTON_REVIEW_SITES = "Review sites"
BUTTON_OK = "OK"
BUTTON_BACKUP = "Back up wallet"
BUTTON_LEARN_MORE = "Learn more"

GREETING_OPTIONS = NotificationOptions(persistent=False, style="greetingStyle")


def try_payments() -> NotificationRequest:
    return NotificationRequest(
        kind=NotificationKind.TRY_PAYMENTS,
        greeting=HELLO,
        message=TRY_PAYMENTS,
        buttons=(
            NotificationButton(BUTTON_NO_THANKS),
            NotificationButton(BUTTON_TRY_PAYMENTS_YES, is_primary=True),
        ),
        options=GREETING_OPTIONS,
    )


def add_funds() -> NotificationRequest:
    return NotificationRequest(
        kind=NotificationKind.ADD_FUNDS,
        greeting=HELLO,
        message=ADD_FUNDS,
        buttons=(
            NotificationButton(BUTTON_TURN_OFF),
            NotificationButton(BUTTON_LATER),
            NotificationButton(BUTTON_ADD_FUNDS, is_primary=True),
        ),
        options=GREETING_OPTIONS,
    )


def review_publishers() -> NotificationRequest:
    return NotificationRequest(
        kind=NotificationKind.REVIEW_PUBLISHERS,
        greeting=HELLO,
        message=RECONCILIATION,
        buttons=(
            NotificationButton(BUTTON_TURN_OFF),
            NotificationButton(BUTTON_DISMISS),
            NotificationButton(BUTTON_REVIEW_SITES, is_primary=True),
        ),
        options=GREETING_OPTIONS,
    )


def payment_done(amount: Decimal | str, currency: str) -> NotificationRequest:
    return NotificationRequest(
        kind=NotificationKind.PAYMENT_DONE,
        greeting=HELLO,
        message=PAYMENT_DONE.format(amount=amount, currency=currency),
        buttons=(
            NotificationButton(BUTTON_TURN_OFF),
            NotificationButton(BUTTON_OK, is_primary=True),
        ),
        options=GREETING_OPTIONS,
    )


def wallet_upgraded() -> NotificationRequest:
    return NotificationRequest(
        kind=NotificationKind.WALLET_UPGRADED,
        greeting=HELLO,
        message=WALLET_CONVERTED_TO_BAT,
        buttons=(
            NotificationButton(BUTTON_BACKUP),
            NotificationButton(BUTTON_DISMISS),
        ),
        options=NotificationOptions(
            persistent=False,
            style="greetingStyle",
            advanced_link=WALLET_LEARN_MORE_URL,
            advanced_text=BUTTON_LEARN_MORE,
        ),
    )
