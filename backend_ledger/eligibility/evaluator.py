"""
Publisher eligibility: statistical thresholds, user overrides, display policy.

eligible : score, duration and visit thresholds (all three are hard gates).
sticky   : the user's persisted opt-in/opt-out for auto-contribution.
blocked  : the user removed the site from the list.
contribute / visible: what the contribution pipeline and the UI list each
combine from the primitives above.

All functions are pure over a LedgerState snapshot. visible() may need to
cache a derived synopsis option; it returns that as an explicit update for the
caller to apply instead of mutating the snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from backend_ledger.database.models import PaymentsSettings
from backend_ledger.ledger_logging import get_logger
from backend_ledger.state.models import LedgerState, SynopsisOptions

logger = get_logger(__name__)


@dataclass(frozen=True)
class VisibilityResult:
    visible: bool
    state_update: SynopsisOptions | None = None
    """Synopsis options to persist (lazy cache of show_only_verified); None when nothing changed."""

    def __bool__(self) -> bool:
        return self.visible


def get_host_pattern(publisher_key: str) -> str:
    """Site-settings key covering both schemes for a publisher host."""
    return f"https?://{publisher_key}"


def eligible(state: LedgerState, publisher_key: str) -> bool:
    """Score > 0 under the configured scorekeeper AND duration >= min AND visits >= min."""
    publisher = state.get_publisher(publisher_key)
    if publisher is None:
        return False
    synopsis = state.synopsis
    score = publisher.scores.get(synopsis.scorekeeper)
    return (
        score is not None
        and score > 0
        and publisher.duration_ms >= synopsis.min_duration
        and publisher.visits >= synopsis.min_visits
    )


def sticky(state: LedgerState, publisher_key: str) -> bool:
    """
    Site setting ledger_payments wins; else the inverse of the publisher's
    exclude option; else opted in.
    """
    site = state.get_site_settings(get_host_pattern(publisher_key))
    result = site.ledger_payments if site is not None else None

    if result is None:
        publisher = state.get_publisher(publisher_key)
        excluded = publisher.options.excluded if publisher is not None else None
        if excluded is not None:
            result = not excluded

    return result is None or result


def blocked(state: LedgerState, publisher_key: str) -> bool:
    site = state.get_site_settings(get_host_pattern(publisher_key))
    return site is not None and site.ledger_payments_shown is False


def contribute(state: LedgerState, publisher_key: str) -> bool:
    """
    Auto-contribution: (sticky OR exclude option not strictly True) AND eligible AND NOT blocked.

    The exclude option also feeds sticky's fallback; both checks stay so either
    path alone can permit contribution.
    """
    publisher = state.get_publisher(publisher_key)
    excluded = publisher.options.excluded if publisher is not None else None
    return (
        (sticky(state, publisher_key) or excluded is not True)
        and eligible(state, publisher_key)
        and not blocked(state, publisher_key)
    )


def visible(state: LedgerState, publisher_key: str, settings: PaymentsSettings) -> VisibilityResult:
    """
    Whether the publisher appears in the contributions list.

    show_only_verified caches the allow-non-verified setting the first time it
    is needed; when it is False only verified publishers are listed.
    """
    update: SynopsisOptions | None = None
    show_only_verified = state.synopsis.show_only_verified
    if show_only_verified is None:
        show_only_verified = settings.allow_non_verified
        update = replace(state.synopsis, show_only_verified=show_only_verified)
        state = state.apply(update)
        logger.debug("synopsis_option_derived", option="show_only_verified", value=show_only_verified)

    publisher = state.get_publisher(publisher_key)
    verified = bool(publisher.options.verified) if publisher is not None else False
    only_verified = not show_only_verified

    result = (
        eligible(state, publisher_key)
        and (not only_verified or verified)
        and not blocked(state, publisher_key)
    )
    return VisibilityResult(visible=result, state_update=update)
