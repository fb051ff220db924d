"""
Domain models for ledger state snapshots.

Wallet info, publisher statistics, synopsis thresholds and per-site overrides.
All models are frozen: a snapshot is taken once per scheduler tick (or per
evaluator call) and never mutated; changes are expressed as new objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

DEFAULT_RECONCILE_FREQUENCY_DAYS = 30
DEFAULT_SCOREKEEPER = "concave"
DEFAULT_MIN_PUBLISHER_DURATION_MS = 8 * 1000
DEFAULT_MIN_PUBLISHER_VISITS = 1


def to_decimal(value: Any, default: Decimal | None = Decimal(0)) -> Decimal | None:
    """Parse a number or numeric string into Decimal; default on None or garbage."""
    if value is None or value == "":
        return default
    if isinstance(value, Decimal):
        return value
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default
    return parsed if parsed.is_finite() else default


def _to_int(value: Any, default: int | None = None) -> int | None:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_mapping(value: Any) -> Mapping[str, Any]:
    """Sub-objects of the wrong JSON type read as empty."""
    return value if isinstance(value, Mapping) else {}


def _as_items(value: Any) -> tuple[Any, ...]:
    return tuple(value) if isinstance(value, (list, tuple)) else ()


def _to_optional_bool(value: Any) -> bool | None:
    if value is None:
        return None
    return bool(value)


@dataclass(frozen=True)
class Transaction:
    """One settled contribution."""

    viewing_id: str
    contribution_amount: Decimal = Decimal(0)
    currency: str = "USD"
    submission_timestamp: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Transaction:
        """Parse {viewingId, submissionStamp, contribution: {fiat: {amount, currency}}}."""
        fiat = _as_mapping(_as_mapping(data.get("contribution")).get("fiat"))
        return cls(
            viewing_id=str(data.get("viewingId") or ""),
            contribution_amount=to_decimal(fiat.get("amount")),
            currency=str(fiat.get("currency") or "USD"),
            submission_timestamp=_to_int(data.get("submissionStamp")),
        )


@dataclass(frozen=True)
class WalletSnapshot:
    """
    Read-only wallet view for one tick.

    Missing values are normal (wallet not created yet, rates not fetched);
    consumers treat None as "rule does not apply".
    """

    balance: Decimal = Decimal(0)
    unconfirmed_balance: Decimal = Decimal(0)
    contribution_target: Decimal | None = None
    """Monthly budget in BAT ("bat" in ledger info)."""
    reconcile_timestamp: int | None = None
    """Epoch ms of the next reconciliation."""
    reconcile_frequency_days: int = DEFAULT_RECONCILE_FREQUENCY_DAYS
    transactions: tuple[Transaction, ...] = ()
    converted: Decimal | None = None
    """Balance converted to fiat; only meaningful with a rate."""
    current_rate: Decimal | None = None
    rates: Mapping[str, Decimal] = field(default_factory=dict)
    created: bool = False
    creating: bool = False
    error: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> WalletSnapshot:
        """Build from a ledger-info mapping; tolerant of partial data and string numbers."""
        data = _as_mapping(data)
        if not data:
            return cls()
        raw_rates = _as_mapping(data.get("rates"))
        rates = {
            str(k): r
            for k, r in ((k, to_decimal(v, None)) for k, v in raw_rates.items())
            if r is not None
        }
        return cls(
            balance=to_decimal(data.get("balance")),
            unconfirmed_balance=to_decimal(data.get("unconfirmed")),
            contribution_target=to_decimal(data.get("bat"), None),
            reconcile_timestamp=_to_int(data.get("reconcileStamp")),
            reconcile_frequency_days=_to_int(data.get("reconcileFrequency"), DEFAULT_RECONCILE_FREQUENCY_DAYS),
            transactions=tuple(
                Transaction.from_dict(t) for t in _as_items(data.get("transactions")) if isinstance(t, Mapping)
            ),
            converted=to_decimal(data.get("converted"), None),
            current_rate=to_decimal(data.get("currentRate"), None),
            rates=rates,
            created=bool(data.get("created")),
            creating=bool(data.get("creating")),
            error=data.get("error"),
        )

    @property
    def has_btc_rate(self) -> bool:
        """True once the wallet has been upgraded and rates fetched."""
        return "BTC" in self.rates


@dataclass(frozen=True)
class PublisherOptions:
    excluded: bool | None = None
    verified: bool | None = None


@dataclass(frozen=True)
class PublisherRecord:
    """Visit statistics and scores for one publisher (site)."""

    key: str
    visits: int = 0
    duration_ms: int = 0
    scores: Mapping[str, float] = field(default_factory=dict)
    options: PublisherOptions = field(default_factory=PublisherOptions)

    @classmethod
    def from_dict(cls, key: str, data: Mapping[str, Any]) -> PublisherRecord:
        data = _as_mapping(data)
        opts = _as_mapping(data.get("options"))
        raw_scores = _as_mapping(data.get("scores"))
        return cls(
            key=key,
            visits=max(0, _to_int(data.get("visits"), 0)),
            duration_ms=max(0, _to_int(data.get("duration"), 0)),
            scores={str(k): s for k, s in ((k, _to_float(v)) for k, v in raw_scores.items()) if s is not None},
            options=PublisherOptions(
                excluded=_to_optional_bool(opts.get("exclude")),
                verified=_to_optional_bool(opts.get("verified")),
            ),
        )


@dataclass(frozen=True)
class SynopsisOptions:
    """Global thresholds governing eligibility and list visibility."""

    scorekeeper: str = DEFAULT_SCOREKEEPER
    min_duration: int = DEFAULT_MIN_PUBLISHER_DURATION_MS
    min_visits: int = DEFAULT_MIN_PUBLISHER_VISITS
    show_only_verified: bool | None = None
    """Cached visibility toggle; None until first derived from settings."""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> SynopsisOptions:
        data = _as_mapping(data)
        if not data:
            return cls()
        return cls(
            scorekeeper=str(data.get("scorekeeper") or DEFAULT_SCOREKEEPER),
            min_duration=_to_int(data.get("minPublisherDuration"), DEFAULT_MIN_PUBLISHER_DURATION_MS),
            min_visits=_to_int(data.get("minPublisherVisits"), DEFAULT_MIN_PUBLISHER_VISITS),
            show_only_verified=_to_optional_bool(data.get("showOnlyVerified")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "scorekeeper": self.scorekeeper,
            "minPublisherDuration": self.min_duration,
            "minPublisherVisits": self.min_visits,
            "showOnlyVerified": self.show_only_verified,
        }


@dataclass(frozen=True)
class SiteSettings:
    """User overrides for one host pattern."""

    ledger_payments: bool | None = None
    """Explicit include/exclude from auto-contribution."""
    ledger_payments_shown: bool | None = None
    """False when the user deleted the site from the list."""


@dataclass(frozen=True)
class LedgerState:
    """Everything the scheduler and evaluator read, as one immutable snapshot."""

    wallet: WalletSnapshot = field(default_factory=WalletSnapshot)
    publishers: Mapping[str, PublisherRecord] = field(default_factory=dict)
    synopsis: SynopsisOptions = field(default_factory=SynopsisOptions)
    site_settings: Mapping[str, SiteSettings] = field(default_factory=dict)
    first_run_timestamp: int | None = None

    def get_publisher(self, key: str) -> PublisherRecord | None:
        return self.publishers.get(key)

    def get_site_settings(self, pattern: str) -> SiteSettings | None:
        return self.site_settings.get(pattern)

    def apply(self, update: SynopsisOptions | None) -> LedgerState:
        """Return a copy with the synopsis update applied (self when update is None)."""
        if update is None:
            return self
        return replace(self, synopsis=update)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> LedgerState:
        data = _as_mapping(data)
        if not data:
            return cls()
        publishers = {
            str(k): PublisherRecord.from_dict(str(k), v)
            for k, v in _as_mapping(data.get("publishers")).items()
        }
        site_settings = {
            str(pattern): SiteSettings(
                ledger_payments=_to_optional_bool(_as_mapping(v).get("ledgerPayments")),
                ledger_payments_shown=_to_optional_bool(_as_mapping(v).get("ledgerPaymentsShown")),
            )
            for pattern, v in _as_mapping(data.get("siteSettings")).items()
        }
        return cls(
            wallet=WalletSnapshot.from_dict(data.get("ledgerInfo")),
            publishers=publishers,
            synopsis=SynopsisOptions.from_dict(data.get("synopsisOptions")),
            site_settings=site_settings,
            first_run_timestamp=_to_int(data.get("firstRunTimestamp")),
        )
