"""
Tests for publisher eligibility (eligibility.evaluator).

States are built with LedgerState.from_dict so the fixtures read like the
browser's ledger state JSON.
"""

from __future__ import annotations

import pytest

from backend_ledger.database.models import PaymentsSettings
from backend_ledger.eligibility import (
    blocked,
    contribute,
    eligible,
    get_host_pattern,
    sticky,
    visible,
)
from backend_ledger.state import LedgerState

KEY = "example.com"
PATTERN = "https?://example.com"


def _state(
    *,
    duration: int = 10_000,
    visits: int = 3,
    score: float | None = 2.5,
    exclude: bool | None = None,
    verified: bool | None = None,
    site: dict | None = None,
    synopsis: dict | None = None,
) -> LedgerState:
    options = {}
    if exclude is not None:
        options["exclude"] = exclude
    if verified is not None:
        options["verified"] = verified
    publisher = {"duration": duration, "visits": visits, "options": options}
    if score is not None:
        publisher["scores"] = {"concave": score}
    data = {
        "publishers": {KEY: publisher},
        "synopsisOptions": synopsis or {"minPublisherDuration": 8000, "minPublisherVisits": 1},
    }
    if site is not None:
        data["siteSettings"] = {PATTERN: site}
    return LedgerState.from_dict(data)


def test_host_pattern():
    assert get_host_pattern(KEY) == PATTERN


# --- eligible ---


def test_eligible_above_all_thresholds():
    assert eligible(_state(), KEY) is True


@pytest.mark.parametrize(
    "kwargs",
    [
        {"score": 0},
        {"score": None},
        {"duration": 7_999},
        {"visits": 0},
    ],
)
def test_each_threshold_is_a_hard_gate(kwargs):
    assert eligible(_state(**kwargs), KEY) is False


def test_thresholds_are_inclusive():
    assert eligible(_state(duration=8000, visits=1), KEY) is True


def test_unknown_publisher_not_eligible():
    assert eligible(_state(), "other.org") is False


def test_eligible_monotonic_in_duration_and_visits():
    """Raising duration or visits never flips an eligible publisher to ineligible."""
    for duration in (8000, 9000, 60_000):
        for visits in (1, 2, 50):
            assert eligible(_state(duration=duration, visits=visits), KEY) is True


def test_scorekeeper_selects_score():
    state = _state(synopsis={"scorekeeper": "visits"})
    assert eligible(state, KEY) is False


# --- sticky ---


def test_sticky_defaults_to_opted_in():
    assert sticky(_state(), KEY) is True


def test_sticky_site_setting_wins():
    assert sticky(_state(site={"ledgerPayments": False}, exclude=False), KEY) is False
    assert sticky(_state(site={"ledgerPayments": True}, exclude=True), KEY) is True


def test_sticky_falls_back_to_exclude_option():
    assert sticky(_state(exclude=True), KEY) is False
    assert sticky(_state(exclude=False), KEY) is True


# --- blocked ---


def test_blocked_only_when_shown_is_false():
    assert blocked(_state(site={"ledgerPaymentsShown": False}), KEY) is True
    assert blocked(_state(site={"ledgerPaymentsShown": True}), KEY) is False
    assert blocked(_state(), KEY) is False


# --- contribute ---


def test_contribute_default():
    assert contribute(_state(), KEY) is True


def test_contribute_site_opt_out_with_exclude_unset():
    """Sticky is False but exclude is not True, so the second check still admits it."""
    assert contribute(_state(site={"ledgerPayments": False}), KEY) is True


def test_contribute_site_opt_out_and_excluded():
    assert contribute(_state(site={"ledgerPayments": False}, exclude=True), KEY) is False


def test_contribute_site_opt_in_overrides_exclude():
    assert contribute(_state(site={"ledgerPayments": True}, exclude=True), KEY) is True


def test_contribute_requires_eligible_and_not_blocked():
    assert contribute(_state(visits=0), KEY) is False
    assert contribute(_state(site={"ledgerPaymentsShown": False}), KEY) is False


# --- visible ---


def test_visible_derives_show_only_verified_once():
    state = _state(verified=False)
    result = visible(state, KEY, PaymentsSettings(allow_non_verified=True))
    assert result.visible is True
    assert result.state_update is not None
    assert result.state_update.show_only_verified is True
    # the snapshot passed in is untouched
    assert state.synopsis.show_only_verified is None

    updated = state.apply(result.state_update)
    again = visible(updated, KEY, PaymentsSettings(allow_non_verified=False))
    assert again.visible is True
    assert again.state_update is None


def test_visible_hides_unverified_when_not_allowed():
    result = visible(_state(verified=False), KEY, PaymentsSettings(allow_non_verified=False))
    assert result.visible is False
    assert result.state_update.show_only_verified is False
    assert bool(result) is False


def test_visible_verified_publisher_when_only_verified():
    result = visible(_state(verified=True), KEY, PaymentsSettings(allow_non_verified=False))
    assert result.visible is True


def test_visible_requires_eligible_and_not_blocked():
    settings = PaymentsSettings(allow_non_verified=True)
    assert visible(_state(duration=100), KEY, settings).visible is False
    assert visible(_state(site={"ledgerPaymentsShown": False}), KEY, settings).visible is False


def test_visible_with_cached_option_ignores_settings():
    state = _state(verified=False, synopsis={"showOnlyVerified": False})
    result = visible(state, KEY, PaymentsSettings(allow_non_verified=True))
    assert result.visible is False
    assert result.state_update is None
