"""Wallet formatting and balance predicates shared by the scheduler and UI-facing callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping

from backend_ledger.state.models import WalletSnapshot, to_decimal

DEFAULT_CURRENCY = "USD"
# Reconcile is considered funded at 90% of the target; unconfirmed deposits drift.
SUFFICIENT_BALANCE_RATIO = Decimal("0.9")
_CENTS = Decimal("0.01")

STATUS_ON_ERROR = "statusOnError"
STATUS_INSUFFICIENT_FUNDS = "insufficientFundsStatus"
STATUS_PENDING_FUNDS = "pendingFundsStatus"
STATUS_DEFAULT_WALLET = "defaultWalletStatus"
STATUS_CREATED_WALLET = "createdWalletStatus"
STATUS_CREATING_WALLET = "creatingWalletStatus"
STATUS_CREATE_WALLET = "createWalletStatus"


@dataclass(frozen=True)
class WalletStatus:
    """Locale id for the wallet status line plus its template args."""

    id: str
    args: Mapping[str, str] = field(default_factory=dict)


def _two_places(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def bat_to_currency_string(bat: Any, wallet: WalletSnapshot | None = None) -> str:
    """
    Convert a BAT amount to "<amount> USD" at the wallet's current rate.

    Zero is always "0.00 USD". Before the wallet has been upgraded (no BTC
    rate) there is nothing to convert against, so the result is "".
    """
    balance = to_decimal(bat)
    if balance == 0:
        return f"0.00 {DEFAULT_CURRENCY}"
    if wallet is None or not wallet.has_btc_rate:
        return ""
    rate = wallet.current_rate or Decimal(0)
    return f"{_two_places(rate * balance)} {DEFAULT_CURRENCY}"


def format_current_balance(wallet: WalletSnapshot | None = None) -> str:
    """Balance line: '5.00 BAT (1.12 USD)' when a rate is known, else '5.00 BAT'."""
    balance = Decimal(0)
    converted = Decimal(0)
    has_rate = False
    if wallet is not None:
        balance = wallet.balance
        converted = wallet.converted or Decimal(0)
        has_rate = wallet.current_rate is not None and wallet.has_btc_rate
    out = f"{_two_places(balance)} BAT"
    if has_rate:
        out += f" ({_two_places(converted)} {DEFAULT_CURRENCY})"
    return out


def sufficient_balance_to_reconcile(wallet: WalletSnapshot) -> bool:
    """balance + unconfirmed >= 90% of the contribution target. No target → False."""
    target = wallet.contribution_target
    if not target:
        return False
    return wallet.balance + wallet.unconfirmed_balance >= SUFFICIENT_BALANCE_RATIO * target


def has_funds(wallet: WalletSnapshot, payments_enabled: bool) -> bool:
    if not payments_enabled:
        return False
    return wallet.balance > 0


def wallet_status(wallet: WalletSnapshot) -> WalletStatus:
    """Pick the wallet status message: error, funding state, or creation progress."""
    if wallet.error:
        return WalletStatus(STATUS_ON_ERROR)
    if wallet.created:
        pending = _two_places(wallet.unconfirmed_balance)
        target = wallet.contribution_target or Decimal(0)
        if pending + wallet.balance < SUFFICIENT_BALANCE_RATIO * target:
            return WalletStatus(STATUS_INSUFFICIENT_FUNDS)
        if pending > 0:
            funds = f"{pending} BAT ({bat_to_currency_string(pending, wallet)})"
            return WalletStatus(STATUS_PENDING_FUNDS, {"funds": funds})
        if wallet.transactions:
            return WalletStatus(STATUS_DEFAULT_WALLET)
        return WalletStatus(STATUS_CREATED_WALLET)
    if wallet.creating:
        return WalletStatus(STATUS_CREATING_WALLET)
    return WalletStatus(STATUS_CREATE_WALLET)


def response_has_content(status_code: int | None) -> bool:
    """2xx other than 204 No Content."""
    if status_code is None:
        return False
    return 200 <= status_code < 300 and status_code != 204


def should_track_view(tab: Mapping[str, Any] | None) -> bool:
    """
    Is this tab showing a real page the user is viewing (not an error page)?
    Only real views accumulate publisher visit time.
    """
    if tab is None:
        return False
    about_error = "aboutDetails" in tab
    active_entry = (tab.get("navigationState") or {}).get("activeEntry") or {}
    status_code = active_entry.get("httpStatusCode")
    response = status_code == 0 or response_has_content(status_code)
    return not about_error and response
