"""
Ledger notification scheduler: polling loop, reconciliation-window rules, responses.

Every 15 minutes one tick reads the ledger state and persisted notification
settings and decides whether to surface a single notification:

- payments disabled → one-time "try payments" upsell once the install is old enough.
- payments enabled, reconciliation < 24h away → "review publishers" if the
  wallet covers 90% of the contribution target, otherwise "add funds".
- payments enabled, reconciliation 24-48h away → early "review publishers"
  when funded.

Each notification is throttled by its own persisted next-eligible timestamp.
Responses come back as (kind, button index); the handler updates settings,
may request the payments panel, and hides that notification.

All writes to notification settings happen under one lock so a response from
a UI thread cannot interleave with a tick on the timer thread.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, NamedTuple

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from pytz import utc

from backend_ledger.config.settings import (
    BACKUP_PANEL_URL,
    DEFAULT_PROFILE_ID,
    DEFAULT_TRY_PAYMENTS_DELAY_MS,
    PAYMENTS_PANEL_URL,
    LedgerConfig,
)
from backend_ledger.database.models import NotificationDedupState, PaymentsSettings
from backend_ledger.database.settings_store import SettingsStore
from backend_ledger.ledger_logging import get_logger
from backend_ledger.notifications import messages
from backend_ledger.notifications.models import (
    ActiveWindow,
    NotificationKind,
    NotificationRequest,
)
from backend_ledger.notifications.sink import NotificationSink
from backend_ledger.state.models import LedgerState, Transaction, WalletSnapshot
from backend_ledger.utils.ledger_utils import has_funds, sufficient_balance_to_reconcile
from backend_ledger.utils.time_utils import DAY_MS, MILLISECONDS, days_ms, now_ms

logger = get_logger(__name__)

POLLING_INTERVAL_MS = 15 * MILLISECONDS["minute"]
ADD_FUNDS_SNOOZE_MS = 3 * DAY_MS
# Reconciliation windows: "soon" (< 24h) and "early" (24h-48h)
RECONCILE_SOON_MS = DAY_MS
RECONCILE_EARLY_MS = 2 * DAY_MS
EARLY_REVIEW_SNOOZE_MS = DAY_MS
# After a review shown < 24h before reconcile, stay quiet until 2 days before the next one
REVIEW_LEAD_DAYS = 2

# Button indexes (positional, fixed per message)
BUTTON_TURN_OFF_NOTIFICATIONS = 0
BUTTON_SNOOZE = 1
BUTTON_OPEN_PAYMENTS = 2
BUTTON_TRY_PAYMENTS_YES = 1
BUTTON_BACKUP_WALLET = 0

StateProvider = Callable[[], LedgerState]
Clock = Callable[[], int]


class WindowDecision(NamedTuple):
    kind: NotificationKind
    next_eligible: int
    """Epoch ms to persist as the kind's next-eligible timestamp."""


@dataclass
class NotificationSchedulerConfig:
    """Per-profile scheduler settings; cadence and snooze windows are module constants."""

    profile_id: str = DEFAULT_PROFILE_ID
    try_payments_delay_ms: int = DEFAULT_TRY_PAYMENTS_DELAY_MS
    payments_url: str = PAYMENTS_PANEL_URL
    backup_url: str = BACKUP_PANEL_URL

    @classmethod
    def from_ledger_config(cls, cfg: LedgerConfig) -> NotificationSchedulerConfig:
        return cls(
            profile_id=cfg.profile_id,
            try_payments_delay_ms=cfg.try_payments_delay_ms,
            payments_url=cfg.payments_url,
            backup_url=cfg.backup_url,
        )


def is_eligible(next_eligible: int | None, now: int) -> bool:
    """No snooze recorded, or the snooze has passed."""
    return next_eligible is None or now > next_eligible


def evaluate_reconcile_window(
    wallet: WalletSnapshot,
    notifications: NotificationDedupState,
    now: int,
) -> WindowDecision | None:
    """
    Decide the enabled-payments notification for this tick, or None.

    Without a reconcile timestamp or a contribution target nothing applies.
    """
    reconcile_stamp = wallet.reconcile_timestamp
    if reconcile_stamp is None or not wallet.contribution_target:
        return None

    remaining = reconcile_stamp - now
    sufficient = sufficient_balance_to_reconcile(wallet)
    review_eligible = is_eligible(notifications.reconcile_soon_next_eligible, now)

    if remaining < RECONCILE_SOON_MS:
        if sufficient:
            if review_eligible:
                next_time = reconcile_stamp + days_ms(wallet.reconcile_frequency_days - REVIEW_LEAD_DAYS)
                return WindowDecision(NotificationKind.REVIEW_PUBLISHERS, next_time)
        elif is_eligible(notifications.add_funds_next_eligible, now):
            return WindowDecision(NotificationKind.ADD_FUNDS, now + ADD_FUNDS_SNOOZE_MS)
    elif remaining < RECONCILE_EARLY_MS:
        if sufficient and review_eligible:
            return WindowDecision(NotificationKind.REVIEW_PUBLISHERS, now + EARLY_REVIEW_SNOOZE_MS)
    return None


def should_show_try_payments(
    first_run_timestamp: int | None,
    notifications: NotificationDedupState,
    now: int,
    delay_ms: int,
) -> bool:
    """Never dismissed and installed at least delay_ms ago. Unknown install time → False."""
    if notifications.try_payments_dismissed:
        return False
    if first_run_timestamp is None:
        return False
    return now - first_run_timestamp >= delay_ms


def should_show_wallet_upgraded(wallet: WalletSnapshot, settings: PaymentsSettings) -> bool:
    """Existing profile, funded, upgraded wallet, notifications on, not yet told."""
    if not has_funds(wallet, settings.payments_enabled):
        return False
    if not settings.notifications.notifications_enabled:
        return False
    migration = settings.migration
    return (
        not migration.is_new_install
        and migration.has_upgraded_wallet
        and not migration.has_been_notified
    )


class NotificationScheduler:
    """
    Owns the polling timer and notification decisions for one profile.

    store: persisted settings (payments toggles, dedup timestamps, migration flags).
    sink: presentation collaborator (show/hide/open panel).
    state_provider: returns the current LedgerState; called once per tick.
    scheduler: APScheduler instance to host the job; a private
        BackgroundScheduler is created (and shut down with us) when omitted.
    clock: epoch-ms time source.
    """

    def __init__(
        self,
        store: SettingsStore,
        sink: NotificationSink,
        *,
        config: NotificationSchedulerConfig | None = None,
        state_provider: StateProvider | None = None,
        scheduler: BaseScheduler | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._sink = sink
        self._config = config or NotificationSchedulerConfig()
        self._state_provider = state_provider
        self._owns_scheduler = scheduler is None
        self._scheduler = scheduler if scheduler is not None else BackgroundScheduler(timezone=utc)
        self._clock = clock or now_ms
        self._job: Job | None = None
        self._lock = threading.RLock()
        self._log = logger.bind(profile_id=self._config.profile_id)

    @property
    def job_id(self) -> str:
        return f"ledger_notifications_{self._config.profile_id}"

    @property
    def job(self) -> Job | None:
        return self._job

    # --- Timer ---

    def init(self, state_provider: StateProvider | None = None) -> Job:
        """
        Install the repeating poll. Any previously installed job is removed
        first, so repeated calls leave exactly one live timer.
        """
        with self._lock:
            if state_provider is not None:
                self._state_provider = state_provider
            self._cancel_job()
            if not self._scheduler.running:
                self._scheduler.start()
            self._job = self._scheduler.add_job(
                self._on_timer,
                "interval",
                seconds=POLLING_INTERVAL_MS // 1000,
                id=self.job_id,
                name="ledger notification poll",
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )
            self._log.info(
                "ledger_notifications_timer_installed",
                job_id=self.job_id,
                interval_ms=POLLING_INTERVAL_MS,
            )
            return self._job

    def shutdown(self) -> None:
        """Cancel the poll; stop the APScheduler instance if we created it."""
        with self._lock:
            self._cancel_job()
            if self._owns_scheduler and self._scheduler.running:
                self._scheduler.shutdown(wait=False)
            self._log.info("ledger_notifications_timer_stopped", job_id=self.job_id)

    def _cancel_job(self) -> None:
        if self._job is None:
            return
        try:
            self._job.remove()
        except JobLookupError:
            # Already gone (scheduler shut down or job removed externally)
            pass
        self._job = None

    def _on_timer(self) -> None:
        """Timer callback: a failing tick is logged and the next one retries from fresh state."""
        try:
            self.on_interval()
        except Exception as e:
            self._log.warning("ledger_tick_failed", error=str(e), exc_info=True)

    # --- Ticks ---

    def _resolve_state(self, state: LedgerState | None) -> LedgerState | None:
        if state is not None:
            return state
        if self._state_provider is None:
            self._log.debug("ledger_tick_skipped", reason="no_state_provider")
            return None
        return self._state_provider()

    def on_interval(self, state: LedgerState | None = None) -> NotificationRequest | None:
        """One poll. Returns the notification shown, or None."""
        with self._lock:
            state = self._resolve_state(state)
            if state is None:
                return None
            settings = self._store.get_payments_settings()
            now = self._clock()

            if settings.payments_enabled:
                if not settings.notifications.notifications_enabled:
                    return None
                return self._show_enabled_notifications(state, settings, now)
            return self._show_disabled_notifications(state, settings, now)

    def _show_enabled_notifications(
        self,
        state: LedgerState,
        settings: PaymentsSettings,
        now: int,
    ) -> NotificationRequest | None:
        decision = evaluate_reconcile_window(state.wallet, settings.notifications, now)
        if decision is None:
            self._log.debug(
                "ledger_tick_no_notification",
                reconcile_stamp=state.wallet.reconcile_timestamp,
            )
            return None

        if decision.kind is NotificationKind.REVIEW_PUBLISHERS:
            self._store.set_reconcile_soon_next_eligible(decision.next_eligible)
            request = messages.review_publishers()
        else:
            self._store.set_add_funds_next_eligible(decision.next_eligible)
            request = messages.add_funds()
        self._present(request, next_eligible=decision.next_eligible)
        return request

    def _show_disabled_notifications(
        self,
        state: LedgerState,
        settings: PaymentsSettings,
        now: int,
    ) -> NotificationRequest | None:
        if not should_show_try_payments(
            state.first_run_timestamp,
            settings.notifications,
            now,
            self._config.try_payments_delay_ms,
        ):
            return None
        request = messages.try_payments()
        self._present(request)
        return request

    def _present(self, request: NotificationRequest, **context: object) -> None:
        self._sink.show_notification(request)
        self._log.info("ledger_notification_shown", kind=request.kind.value, **context)

    # --- Launch and external events ---

    def on_launch(self, state: LedgerState | None = None) -> NotificationRequest | None:
        """Startup check for the one-time wallet-upgraded message."""
        with self._lock:
            state = self._resolve_state(state)
            if state is None:
                return None
            settings = self._store.get_payments_settings()
            if not settings.payments_enabled:
                return None
            if not should_show_wallet_upgraded(state.wallet, settings):
                return None
            return self.show_wallet_upgraded()

    def show_wallet_upgraded(self) -> NotificationRequest:
        with self._lock:
            self._store.mark_wallet_upgrade_notified()
            self._sink.on_bitcoin_to_bat_notified()
            request = messages.wallet_upgraded()
            self._present(request)
            return request

    def show_payment_done(self, amount: Decimal | str, currency: str) -> NotificationRequest:
        """A contribution was made: drop any pending "add funds" prompt and announce it."""
        with self._lock:
            self._sink.hide_notification(NotificationKind.ADD_FUNDS)
            request = messages.payment_done(amount, currency)
            self._present(request, amount=str(amount), currency=currency)
            return request

    def on_new_transaction(self, transaction: Transaction) -> NotificationRequest:
        return self.show_payment_done(transaction.contribution_amount, transaction.currency)

    # --- Responses ---

    def on_response(
        self,
        kind: NotificationKind | str,
        button_index: int,
        active_window: ActiveWindow | None = None,
    ) -> bool:
        """
        Apply the side effects of a button press and hide the message.
        Returns False (no-op) for kinds this scheduler does not own.
        """
        try:
            kind = NotificationKind(kind)
        except ValueError:
            self._log.debug("ledger_response_ignored", kind=str(kind), button_index=button_index)
            return False

        with self._lock:
            if kind in (NotificationKind.ADD_FUNDS, NotificationKind.REVIEW_PUBLISHERS):
                # ADD_FUNDS index 1 ("later"): the snooze was recorded when it was shown
                if button_index == BUTTON_TURN_OFF_NOTIFICATIONS:
                    self._store.set_notifications_enabled(False)
                elif button_index == BUTTON_OPEN_PAYMENTS:
                    self._open_panel(self._config.payments_url, active_window)
            elif kind is NotificationKind.PAYMENT_DONE:
                if button_index == BUTTON_TURN_OFF_NOTIFICATIONS:
                    self._store.set_notifications_enabled(False)
            elif kind is NotificationKind.TRY_PAYMENTS:
                if button_index == BUTTON_TRY_PAYMENTS_YES:
                    self._open_panel(self._config.payments_url, active_window)
                self._store.set_try_payments_dismissed(True)
            elif kind is NotificationKind.WALLET_UPGRADED:
                if button_index == BUTTON_BACKUP_WALLET:
                    self._open_panel(self._config.backup_url, active_window)

            self._sink.hide_notification(kind)
            self._log.info("ledger_notification_response", kind=kind.value, button_index=button_index)
            return True

    def _open_panel(self, url: str, active_window: ActiveWindow | None) -> None:
        if active_window is None:
            self._log.info("ledger_panel_skipped", reason="no_active_window", url=url)
            return
        self._sink.open_panel(url, active_window.id)
