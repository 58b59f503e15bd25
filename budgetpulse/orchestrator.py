"""
Main Orchestrator for BudgetPulse

This module ties together the store, validator, feature gating, alerts
and the widget snapshot, and defines the end-to-end flow for entering a
record:

    form input → validate → add to ledger → persist → budget alert → widget refresh

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing with a validation error reaches the ledger
- Premium-only actions are refused before they touch data
- A persistence failure is reported to the UI instead of being retried
"""

from datetime import date
from pathlib import Path
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel

from budgetpulse.alerts import AlertState, BudgetAlert, next_alert
from budgetpulse.audit import AuditLogger, configure_logging
from budgetpulse.config import AppSettings, get_settings
from budgetpulse.features import Feature, FeatureAccess
from budgetpulse.i18n import translate
from budgetpulse.ledger.store import LedgerStore
from budgetpulse.models.records import Expense, Income, SavingsGoal, Subscription
from budgetpulse.models.validation import ValidationResult
from budgetpulse.services.storage import (
    DetachedLedgerStorage,
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    JsonLinesAuditStorage,
    PersistenceUnavailableError,
    StorageError,
)
from budgetpulse.validation import RecordValidator
from budgetpulse.widgets import build_snapshot, write_snapshot


class EntryOutcome(BaseModel):
    """What happened to a submitted record."""

    accepted: bool
    persisted: bool = False
    record: Optional[Union[Expense, Income]] = None
    validation: Optional[ValidationResult] = None
    alert: Optional[BudgetAlert] = None
    message: str = ""


class EntryFlow:
    """
    Orchestrates adding records by hand.

    Flow:
    1. Validate → schema then semantic checks
    2. Add → append to the in-memory ledger
    3. Persist → save through the storage backend (no retry)
    4. Alert → report newly crossed budget thresholds
    5. Widget → rewritten by the store after every successful save
    """

    def __init__(
        self,
        store: LedgerStore,
        validator: Optional[RecordValidator] = None,
        features: Optional[FeatureAccess] = None,
        audit_logger: Optional[AuditLogger] = None,
        widget_path: Optional[Path] = None,
        settings: Optional[AppSettings] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._settings = settings or get_settings().app
        self._validator = validator or RecordValidator(self._settings, audit_logger)
        self._features = features or FeatureAccess(settings=self._settings, audit_logger=audit_logger)
        self._widget_path = widget_path
        self.alert_state = AlertState()
        if widget_path is not None:
            store.add_commit_listener(self.refresh_widget)

    @property
    def store(self) -> LedgerStore:
        return self._store

    @property
    def features(self) -> FeatureAccess:
        return self._features

    def submit_expense(
        self,
        data: Union[dict[str, Any], Expense],
        today: Optional[date] = None,
    ) -> EntryOutcome:
        today = today or date.today()
        record, result = self._validator.validate(
            Expense, data, existing=self._store.expenses, today=today
        )
        if record is None or result.has_errors:
            return EntryOutcome(
                accepted=False,
                validation=result,
                message=self._validator.get_user_friendly_summary(result),
            )
        if record.receipt_ref:
            self._features.require(Feature.RECEIPTS)

        persisted = self.persist(lambda: self._store.add_expense(record))
        alert = self.check_budget_alert(today)
        return EntryOutcome(
            accepted=True,
            persisted=persisted,
            record=record,
            validation=result,
            alert=alert,
            message=self._persist_message(persisted, result),
        )

    def submit_income(
        self,
        data: Union[dict[str, Any], Income],
        today: Optional[date] = None,
    ) -> EntryOutcome:
        today = today or date.today()
        record, result = self._validator.validate(Income, data, today=today)
        if record is None or result.has_errors:
            return EntryOutcome(
                accepted=False,
                validation=result,
                message=self._validator.get_user_friendly_summary(result),
            )

        persisted = self.persist(lambda: self._store.add_income(record))
        return EntryOutcome(
            accepted=True,
            persisted=persisted,
            record=record,
            validation=result,
            message=self._persist_message(persisted, result),
        )

    def create_savings_goal(self, goal: SavingsGoal) -> SavingsGoal:
        """
        Raises:
            FeatureLockedError: If a free user already has the maximum goals
        """
        self._features.require_savings_goal_slot(len(self._store.savings_goals))
        return self._store.add_savings_goal(goal)

    def create_subscription(self, subscription: Subscription) -> Subscription:
        self._features.require(Feature.SUBSCRIPTION_TRACKER)
        return self._store.add_subscription(subscription)

    def check_budget_alert(self, today: Optional[date] = None) -> Optional[BudgetAlert]:
        today = today or date.today()
        alert, self.alert_state = next_alert(
            progress=self._store.budget_progress(today),
            remaining=self._store.remaining_with_rollover(today),
            state=self.alert_state,
            today=today,
            thresholds=self._settings.alert_thresholds_list,
        )
        return alert

    def refresh_widget(self, today: Optional[date] = None) -> None:
        """Rewrite the home-screen snapshot; runs after every successful save."""
        if self._widget_path is None:
            return
        try:
            write_snapshot(build_snapshot(self._store, today), self._widget_path)
        except OSError as e:
            # The widget is a convenience; never fail an entry over it
            if self._audit_logger:
                self._audit_logger.log_error("widget_refresh_failed", str(e))

    def persist(self, action: Callable[[], Any]) -> bool:
        """Run a ledger change; False if it stays unsaved because the backend is unavailable."""
        try:
            action()
            return True
        except PersistenceUnavailableError:
            return False

    def _persist_message(self, persisted: bool, result: ValidationResult) -> str:
        if not persisted:
            return translate("persistence_unavailable", self._settings.language)
        return self._validator.get_user_friendly_summary(result)


def create_app_components(
    use_storage: bool = True,
) -> tuple[LedgerStore, EntryFlow, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to persist to the configured data directory.
                    Set to False to run entirely in memory.

    Returns:
        (store, entry_flow, audit_logger)

    When the ledger cannot be read or saved the app still starts;
    ``store.persistence_error`` is set and every entry reports that it
    was not saved.
    """
    settings = get_settings()
    configure_logging(debug=settings.app.debug_mode)

    widget_path = None
    if use_storage:
        storage_settings = settings.storage
        ledger_storage = JsonFileLedgerStorage(storage_settings.ledger_path)
        audit_logger = AuditLogger(
            JsonLinesAuditStorage(storage_settings.audit_path)
            if storage_settings.audit_enabled
            else None
        )
        widget_path = storage_settings.data_dir / "widget.json"
    else:
        ledger_storage = InMemoryLedgerStorage()
        audit_logger = AuditLogger()  # Local-only logging

    try:
        store = LedgerStore.open(ledger_storage, audit_logger=audit_logger)
    except StorageError as e:
        # Unreadable ledger: leave the file untouched and refuse every save
        audit_logger.log_error("ledger_unavailable", str(e))
        store = LedgerStore.open(DetachedLedgerStorage(str(e)), audit_logger=audit_logger)
        store.persistence_error = str(e)
        widget_path = None

    entry_flow = EntryFlow(
        store,
        features=FeatureAccess(audit_logger=audit_logger),
        audit_logger=audit_logger,
        widget_path=widget_path,
    )
    if store.persistence_error is None:
        entry_flow.refresh_widget()
    return store, entry_flow, audit_logger
