"""
Tests for BudgetPulse

Test strategy:
1. Unit tests for individual components (models, aggregation, validators)
2. Integration tests for the store and flows (with in-memory storage)
3. No real data directory in tests (use tmp_path)
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from budgetpulse.models.records import (
    Budget,
    CurrencyCode,
    DateRange,
    Expense,
    ExpenseCategory,
    Income,
    LedgerState,
    RecurrenceType,
    SavingsContribution,
    SavingsGoal,
    Subscription,
    quantize_amount,
)
from budgetpulse.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from budgetpulse.models.validation import ValidationIssue, ValidationResult


class TestRecordModels:
    """Tests for expense and income models."""

    def test_expense_creation(self):
        """Test Expense model creation with defaults."""
        expense = Expense(title="Coffee", amount=Decimal("4.50"))
        assert expense.title == "Coffee"
        assert expense.category == ExpenseCategory.OTHER
        assert expense.recurrence is None
        assert not expense.is_recurring

    def test_expense_strips_whitespace(self):
        """Test that whitespace is stripped from the title."""
        expense = Expense(title="  Lunch  ", amount=Decimal("12"))
        assert expense.title == "Lunch"

    def test_expense_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            Expense(title="Refund?", amount=Decimal("-1.00"))

    def test_expense_rejects_sub_cent_amount(self):
        """Test that amounts carry at most two decimal places."""
        with pytest.raises(ValueError):
            Expense(title="Fraction", amount=Decimal("1.005"))

    def test_expense_rejects_empty_title(self):
        with pytest.raises(ValueError):
            Expense(title="   ", amount=Decimal("1"))

    def test_recurring_expense(self):
        expense = Expense(
            title="Rent",
            amount=Decimal("900"),
            recurrence=RecurrenceType.MONTHLY,
            next_due_date=date(2024, 7, 1),
        )
        assert expense.is_recurring

    def test_income_round_trips_through_json(self):
        """Test that Decimal amounts survive JSON serialization exactly."""
        income = Income(title="Salary", amount=Decimal("3200.10"), date=date(2024, 6, 1))
        restored = Income.model_validate_json(income.model_dump_json())
        assert restored == income
        assert restored.amount == Decimal("3200.10")

    def test_quantize_amount_rounds_half_up(self):
        assert quantize_amount(Decimal("2.005")) == Decimal("2.01")
        assert quantize_amount(Decimal("2.004")) == Decimal("2.00")


class TestEnums:
    """Tests for enum helpers."""

    def test_every_category_has_icon_and_color(self):
        for category in ExpenseCategory:
            assert category.icon
            assert category.color

    def test_recurrence_monthly_multipliers(self):
        assert RecurrenceType.WEEKLY.monthly_multiplier == Decimal("4.33")
        assert RecurrenceType.BIWEEKLY.monthly_multiplier == Decimal("2.17")
        assert RecurrenceType.MONTHLY.monthly_multiplier == Decimal("1")

    def test_recurrence_steps(self):
        day = date(2024, 1, 31)
        assert day + RecurrenceType.WEEKLY.step == date(2024, 2, 7)
        assert day + RecurrenceType.BIWEEKLY.step == date(2024, 2, 14)
        assert day + RecurrenceType.MONTHLY.step == date(2024, 2, 29)
        assert day + RecurrenceType.YEARLY.step == date(2025, 1, 31)

    def test_currency_symbols(self):
        assert CurrencyCode.USD.symbol == "$"
        assert CurrencyCode.EUR.symbol == "€"
        assert CurrencyCode.GBP.symbol == "£"


class TestSavingsGoal:
    """Tests for the savings goal invariants."""

    def test_current_amount_derived_from_contributions(self):
        goal = SavingsGoal(
            title="Trip",
            target_amount=Decimal("1000"),
            contributions=[
                SavingsContribution(amount=Decimal("100")),
                SavingsContribution(amount=Decimal("150.50")),
            ],
        )
        assert goal.current_amount == Decimal("250.50")
        assert goal.remaining_amount == Decimal("749.50")
        assert goal.progress == pytest.approx(0.2505)

    def test_new_goal_starts_at_zero(self):
        goal = SavingsGoal(title="Bike", target_amount=Decimal("500"))
        assert goal.current_amount == Decimal("0")
        assert goal.progress == 0.0
        assert not goal.is_completed

    def test_mismatched_current_amount_rejected(self):
        """Test that current_amount must equal the contributions total."""
        with pytest.raises(ValueError, match="does not match"):
            SavingsGoal(
                title="Trip",
                target_amount=Decimal("1000"),
                current_amount=Decimal("50"),
                contributions=[],
            )

    def test_progress_caps_at_one(self):
        goal = SavingsGoal(
            title="Phone",
            target_amount=Decimal("100"),
            contributions=[SavingsContribution(amount=Decimal("150"))],
        )
        assert goal.progress == 1.0
        assert goal.is_completed
        assert goal.remaining_amount == Decimal("0")

    def test_suggested_monthly_contribution(self):
        goal = SavingsGoal(
            title="Car",
            target_amount=Decimal("1000"),
            target_date=date(2024, 9, 15),
        )
        today = date(2024, 6, 15)
        assert goal.days_remaining(today) == 92
        assert goal.suggested_monthly_contribution(today) == Decimal("333.33")

    def test_suggested_contribution_uses_at_least_one_month(self):
        goal = SavingsGoal(
            title="Gift",
            target_amount=Decimal("80"),
            target_date=date(2024, 6, 20),
        )
        assert goal.suggested_monthly_contribution(date(2024, 6, 15)) == Decimal("80.00")

    def test_no_target_date(self):
        goal = SavingsGoal(title="Rainy day", target_amount=Decimal("500"))
        assert goal.days_remaining(date(2024, 6, 15)) is None
        assert goal.suggested_monthly_contribution(date(2024, 6, 15)) is None


class TestSubscription:
    """Tests for subscription cost normalization."""

    def test_weekly_monthly_cost(self):
        sub = Subscription(name="Meal kit", amount=Decimal("10"), recurrence=RecurrenceType.WEEKLY)
        assert sub.monthly_cost == Decimal("43.30")
        assert sub.yearly_cost == Decimal("519.60")

    def test_yearly_monthly_cost(self):
        sub = Subscription(name="Domain", amount=Decimal("120"), recurrence=RecurrenceType.YEARLY)
        assert sub.monthly_cost == Decimal("10.00")
        assert sub.yearly_cost == Decimal("120.00")

    def test_yearly_cost_rounds_once(self):
        sub = Subscription(name="Hosting", amount=Decimal("100.00"), recurrence=RecurrenceType.YEARLY)
        assert sub.monthly_cost == Decimal("8.33")
        assert sub.yearly_cost == Decimal("100.00")

    def test_due_soon_and_overdue(self):
        today = date(2024, 6, 15)
        soon = Subscription(name="Music", amount=Decimal("9.99"), next_billing_date=date(2024, 6, 20))
        late = Subscription(name="Gym", amount=Decimal("30"), next_billing_date=date(2024, 6, 10))
        far = Subscription(name="Cloud", amount=Decimal("2"), next_billing_date=date(2024, 7, 30))

        assert soon.days_until_billing(today) == 5
        assert soon.is_due_soon(today)
        assert late.is_overdue(today)
        assert not late.is_due_soon(today)
        assert not far.is_due_soon(today)


class TestBudget:
    """Tests for the budget model."""

    def test_defaults(self):
        budget = Budget()
        assert budget.monthly_limit == Decimal("1000.00")
        assert budget.currency == CurrencyCode.USD
        assert budget.effective_limit == Decimal("1000.00")

    def test_effective_limit_includes_rollover_only_when_enabled(self):
        budget = Budget(rollover_amount=Decimal("-150.00"))
        assert budget.effective_limit == Decimal("1000.00")

        enabled = Budget(rollover_enabled=True, rollover_amount=Decimal("-150.00"))
        assert enabled.effective_limit == Decimal("850.00")

    def test_set_limit_sets_and_removes(self):
        budget = Budget().set_limit(ExpenseCategory.FOOD, Decimal("300"))
        assert budget.limit_for(ExpenseCategory.FOOD) == Decimal("300")

        cleared = budget.set_limit(ExpenseCategory.FOOD, None)
        assert cleared.limit_for(ExpenseCategory.FOOD) is None

    def test_set_limit_rejects_negative(self):
        with pytest.raises(ValidationError):
            Budget().set_limit(ExpenseCategory.FOOD, Decimal("-5"))

    def test_rollover_period_format(self):
        with pytest.raises(ValueError):
            Budget(last_rollover_period="June 2024")


class TestLedgerState:

    def test_empty_state(self):
        state = LedgerState()
        assert state.expenses == []
        assert state.budget == Budget()

    def test_round_trip(self):
        state = LedgerState(
            expenses=[Expense(title="Coffee", amount=Decimal("5.50"), date=date(2024, 6, 1))],
            savings_goals=[SavingsGoal(
                title="Trip",
                target_amount=Decimal("500"),
                contributions=[SavingsContribution(amount=Decimal("25"), date=date(2024, 6, 2))],
            )],
        )
        restored = LedgerState.model_validate_json(state.model_dump_json())
        assert restored == state


class TestDateRange:

    def test_contains_is_inclusive(self):
        date_range = DateRange(start=date(2024, 6, 1), end=date(2024, 6, 30))
        assert date(2024, 6, 1) in date_range
        assert date(2024, 6, 30) in date_range
        assert date(2024, 7, 1) not in date_range

    def test_end_before_start(self):
        with pytest.raises(ValueError, match="Date range end cannot be before start"):
            DateRange(start=date(2024, 6, 30), end=date(2024, 6, 1))


class TestValidationModels:
    """Tests for validation-related models."""

    def test_validation_issue_creation(self):
        """Test ValidationIssue model creation."""
        issue = ValidationIssue(
            field="amount",
            issue_type="suspicious_value",
            message="Amount is zero",
            severity="warning",
        )
        assert issue.field == "amount"
        assert issue.severity == "warning"

    def test_validation_issue_severity_validation(self):
        """Test severity must be error, warning, or info."""
        with pytest.raises(ValueError):
            ValidationIssue(
                field="test",
                issue_type="test",
                message="test",
                severity="invalid",
            )

    def test_validation_result_properties(self):
        """Test ValidationResult computed properties."""
        result = ValidationResult(
            record_id=uuid4(),
            schema_valid=True,
            semantic_valid=True,
            issues=[
                ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message="Date is in the future",
                    severity="warning",
                ),
            ],
        )
        assert result.is_valid
        assert not result.has_errors
        assert result.error_count == 0
        assert len(result.warnings) == 1


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.RECORD_ADDED,
            entity_type="expense",
            description="Test event",
        )
        assert event.event_type == AuditEventType.RECORD_ADDED
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        entity_id = uuid4()
        event = AuditEventBuilder.record_added("expense", entity_id, "Coffee")
        log_dict = event.to_log_dict()

        assert log_dict["event_type"] == "record_added"
        assert log_dict["entity_id"] == str(entity_id)
        assert "timestamp" in log_dict

    def test_persistence_failed_event(self):
        event = AuditEventBuilder.persistence_failed("save", "disk full")
        assert event.event_type == AuditEventType.SAVE_FAILED
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"

        load_event = AuditEventBuilder.persistence_failed("load", "gone")
        assert load_event.event_type == AuditEventType.LOAD_FAILED

    def test_recurring_advanced_event_types(self):
        entity_id = uuid4()
        paid = AuditEventBuilder.recurring_advanced("expense", entity_id, "2024-07-15", paid=True)
        skipped = AuditEventBuilder.recurring_advanced("expense", entity_id, "2024-07-15", paid=False)
        subscription = AuditEventBuilder.recurring_advanced(
            "subscription", entity_id, "2024-07-15", paid=True
        )
        assert paid.event_type == AuditEventType.RECURRING_PAID
        assert skipped.event_type == AuditEventType.RECURRING_SKIPPED
        assert subscription.event_type == AuditEventType.SUBSCRIPTION_PAID
