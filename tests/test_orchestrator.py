"""Integration tests for the entry flow and component factory."""

import json
import pytest
from datetime import date
from decimal import Decimal

from budgetpulse.config import get_settings
from budgetpulse.ledger import FeatureLockedError
from budgetpulse.models.records import Expense, LedgerState, SavingsGoal, Subscription
from budgetpulse.orchestrator import EntryFlow, create_app_components
from budgetpulse.services.storage import JsonFileLedgerStorage, PersistenceUnavailableError


TODAY = date(2024, 6, 15)


@pytest.fixture
def flow(store, settings, audit_logger, tmp_path) -> EntryFlow:
    return EntryFlow(
        store,
        audit_logger=audit_logger,
        widget_path=tmp_path / "widget.json",
        settings=settings,
    )


class TestEntryFlow:

    def test_submit_valid_expense(self, flow, store, tmp_path):
        outcome = flow.submit_expense(
            {"title": "Groceries", "amount": "54.20", "date": TODAY}, today=TODAY
        )

        assert outcome.accepted
        assert outcome.persisted
        assert outcome.alert is None
        assert store.total_spent_this_month() == Decimal("54.20")
        widget = json.loads((tmp_path / "widget.json").read_text(encoding="utf-8"))
        assert widget["spent_this_month"] == "54.20"

    def test_invalid_expense_never_reaches_ledger(self, flow, store, storage):
        outcome = flow.submit_expense({"title": "", "amount": "-1"}, today=TODAY)

        assert not outcome.accepted
        assert outcome.validation.has_errors
        assert store.expenses == []
        assert storage.save_count == 0

    def test_warnings_do_not_block(self, flow, store):
        outcome = flow.submit_expense(
            {"title": "Free sample", "amount": "0", "date": TODAY}, today=TODAY
        )
        assert outcome.accepted
        assert outcome.validation.warnings
        assert len(store.expenses) == 1

    def test_budget_alert_after_threshold(self, flow):
        first = flow.submit_expense({"title": "Rent", "amount": "800", "date": TODAY}, today=TODAY)
        assert first.alert.threshold == 75

        second = flow.submit_expense({"title": "Snack", "amount": "5", "date": TODAY}, today=TODAY)
        assert second.alert is None

    def test_unavailable_storage_reported(self, flow, store, storage):
        storage.fail_on_save = True
        outcome = flow.submit_expense(
            {"title": "Taxi", "amount": "18", "date": TODAY}, today=TODAY
        )

        assert outcome.accepted
        assert not outcome.persisted
        assert outcome.message == "Your data could not be saved. Please try again."
        assert len(store.expenses) == 1

    def test_widget_refreshed_after_store_changes(self, flow, store, tmp_path):
        outcome = flow.submit_expense(
            {"title": "Dinner", "amount": "50.00", "date": TODAY}, today=TODAY
        )
        store.delete_expense(outcome.record.id)

        widget = json.loads((tmp_path / "widget.json").read_text(encoding="utf-8"))
        assert widget["spent_this_month"] == "0"

    def test_persist_reports_unsaved_delete(self, flow, store, storage):
        outcome = flow.submit_expense(
            {"title": "Dinner", "amount": "50.00", "date": TODAY}, today=TODAY
        )
        storage.fail_on_save = True

        assert flow.persist(lambda: store.delete_expense(outcome.record.id)) is False
        assert store.expenses == []
        assert store.persistence_error

        storage.fail_on_save = False
        assert flow.persist(lambda: store.delete_expense(outcome.record.id)) is True

    def test_submit_income(self, flow, store):
        outcome = flow.submit_income({"title": "Salary", "amount": "2500", "date": TODAY}, today=TODAY)
        assert outcome.accepted
        assert store.total_income_this_month(TODAY) == Decimal("2500")

    def test_receipts_need_premium(self, flow, store):
        with pytest.raises(FeatureLockedError):
            flow.submit_expense(
                {"title": "Shoes", "amount": "80", "date": TODAY, "receipt_ref": "r-1"}, today=TODAY
            )
        assert store.expenses == []

    def test_free_plan_savings_goal_limit(self, flow, store):
        flow.create_savings_goal(SavingsGoal(title="One", target_amount=Decimal("10")))
        flow.create_savings_goal(SavingsGoal(title="Two", target_amount=Decimal("10")))
        with pytest.raises(FeatureLockedError):
            flow.create_savings_goal(SavingsGoal(title="Three", target_amount=Decimal("10")))
        assert len(store.savings_goals) == 2

    def test_subscription_tracker_needs_premium(self, flow, store):
        with pytest.raises(FeatureLockedError):
            flow.create_subscription(Subscription(name="Music", amount=Decimal("9.99")))
        assert store.subscriptions == []


class TestCreateAppComponents:

    @pytest.fixture(autouse=True)
    def data_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BUDGETPULSE_STORAGE_DATA_DIR", str(tmp_path))
        get_settings.cache_clear()
        yield tmp_path
        get_settings.cache_clear()

    def test_persists_to_data_dir(self, data_dir):
        store, entry_flow, audit_logger = create_app_components(use_storage=True)
        entry_flow.submit_expense({"title": "Coffee", "amount": "3.20"})

        assert (data_dir / "ledger.json").exists()
        assert (data_dir / "widget.json").exists()
        assert audit_logger.recent_events()

    def test_in_memory_mode(self, data_dir):
        store, _, _ = create_app_components(use_storage=False)
        assert store.expenses == []
        assert not (data_dir / "ledger.json").exists()

    def test_corrupt_ledger_runs_unsaved(self, data_dir):
        ledger = data_dir / "ledger.json"
        ledger.write_text("{broken", encoding="utf-8")

        store, entry_flow, _ = create_app_components(use_storage=True)
        outcome = entry_flow.submit_expense({"title": "Coffee", "amount": "3.20"})

        assert store.persistence_error
        assert outcome.accepted
        assert not outcome.persisted
        assert outcome.message == "Your data could not be saved. Please try again."
        assert len(store.expenses) == 1
        assert ledger.read_text(encoding="utf-8") == "{broken"

    def test_non_utf8_ledger_runs_unsaved(self, data_dir):
        ledger = data_dir / "ledger.json"
        ledger.write_bytes(b"\xff\xfe{}")

        store, entry_flow, _ = create_app_components(use_storage=True)
        outcome = entry_flow.submit_expense({"title": "Coffee", "amount": "3.20"})

        assert "not UTF-8" in store.persistence_error
        assert not outcome.persisted
        assert ledger.read_bytes() == b"\xff\xfe{}"

    def test_loaded_ledger_kept_when_save_fails(self, data_dir, monkeypatch):
        state = LedgerState(
            schema_version=2,
            expenses=[Expense(title="Rent", amount=Decimal("900"), date=date.today())],
        )
        (data_dir / "ledger.json").write_text(state.model_dump_json(), encoding="utf-8")

        def refuse(self, state):
            raise PersistenceUnavailableError("disk is read-only")

        monkeypatch.setattr(JsonFileLedgerStorage, "save", refuse)
        store, entry_flow, _ = create_app_components(use_storage=True)
        outcome = entry_flow.submit_expense({"title": "Coffee", "amount": "3.20"})

        assert [e.title for e in store.expenses] == ["Rent", "Coffee"]
        assert store.persistence_error == "disk is read-only"
        assert not outcome.persisted

    def test_widget_follows_every_save(self, data_dir):
        store, entry_flow, _ = create_app_components(use_storage=True)
        widget = data_dir / "widget.json"

        outcome = entry_flow.submit_expense({"title": "Dinner", "amount": "50.00"})
        assert json.loads(widget.read_text(encoding="utf-8"))["spent_this_month"] == "50.00"

        store.delete_expense(outcome.record.id)
        assert json.loads(widget.read_text(encoding="utf-8"))["spent_this_month"] == "0"
