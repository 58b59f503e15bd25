"""
Ledger Store

This module owns the in-memory ledger and is the only thing that mutates it.
Screens read derived values from here and call the actions to change data.

DESIGN DECISION: The store enforces the boundaries:
- Every mutation is persisted immediately through the storage interface
- A failed save is surfaced as PersistenceUnavailableError, never retried
- Every mutation is audited
- Savings goals are rebuilt (and revalidated) whenever contributions
  change, so current_amount can never drift from its contributions

All operations are synchronous and run on a single owner. A mutation is
fully applied in memory before the method returns, even when the save
afterwards fails; the next successful save persists it.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Optional, TypeVar
from uuid import UUID

from budgetpulse import reminders
from budgetpulse.audit import AuditLogger
from budgetpulse.config import AppSettings, get_settings
from budgetpulse.i18n import translate
from budgetpulse.ledger import aggregation
from budgetpulse.ledger.aggregation import Period
from budgetpulse.ledger.errors import NotRecurringError, RecordNotFoundError
from budgetpulse.ledger.search import SearchKind, SearchResults, search_records
from budgetpulse.models.audit import AuditEventBuilder
from budgetpulse.models.records import (
    CURRENT_SCHEMA_VERSION,
    Budget,
    CategoryBreakdown,
    CurrencyCode,
    DailySpending,
    Expense,
    ExpenseCategory,
    Income,
    LedgerState,
    MonthlySpending,
    SavingsContribution,
    SavingsGoal,
    Subscription,
    quantize_amount,
)
from budgetpulse.reminders import Reminder
from budgetpulse.services.storage import (
    LedgerStorageInterface,
    PersistenceUnavailableError,
    StorageError,
)


T = TypeVar("T", Expense, Income, SavingsGoal, Subscription)

ZERO = Decimal("0")


class LedgerStore:
    """
    Central data store for expenses, incomes, savings goals,
    subscriptions and the budget.

    Usage:
        store = LedgerStore.open(JsonFileLedgerStorage())
        store.add_expense(Expense(title="Coffee", amount=Decimal("4.50")))
        store.budget_progress()
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AppSettings] = None,
        clock: Callable[[], date] = date.today,
    ):
        self._storage = storage
        self._audit = audit_logger or AuditLogger()
        self._settings = settings or get_settings().app
        self._clock = clock
        self._state = LedgerState()
        self._commit_listeners: list[Callable[[], None]] = []
        # Reason the last save failed; cleared by the next successful save
        self.persistence_error: Optional[str] = None

    @classmethod
    def open(
        cls,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AppSettings] = None,
        clock: Callable[[], date] = date.today,
    ) -> "LedgerStore":
        """
        Load persisted data, migrate it if needed and apply this month's rollover.

        A ledger that loads keeps its data even when the save after the
        migration or the rollover fails; ``persistence_error`` then says
        why nothing reached the backend.

        Raises:
            StorageError: If the stored ledger cannot be read or decoded
        """
        store = cls(storage, audit_logger=audit_logger, settings=settings, clock=clock)
        store.load()
        for step in (store.migrate, store.check_and_apply_rollover):
            try:
                step()
            except PersistenceUnavailableError:
                # Already audited and recorded on persistence_error
                continue
        return store

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> None:
        """
        Replace the in-memory ledger with the stored one.

        Raises:
            StorageError: If the backend cannot be read or decoded
        """
        try:
            state = self._storage.load()
        except StorageError as e:
            self._audit.log_persistence_failed("load", str(e))
            raise

        self._state = state
        self._audit.log(AuditEventBuilder.ledger_loaded({
            "expenses": len(state.expenses),
            "incomes": len(state.incomes),
            "savings_goals": len(state.savings_goals),
            "subscriptions": len(state.subscriptions),
        }))

    def migrate(self) -> bool:
        """Re-save a ledger written by an older schema at the current version."""
        old_version = self._state.schema_version
        if old_version >= CURRENT_SCHEMA_VERSION:
            return False
        self._state.schema_version = CURRENT_SCHEMA_VERSION
        self._audit.log(AuditEventBuilder.ledger_migrated(old_version, CURRENT_SCHEMA_VERSION))
        self._commit()
        return True

    def add_commit_listener(self, callback: Callable[[], None]) -> None:
        """Call ``callback`` after every successful save."""
        self._commit_listeners.append(callback)

    def _commit(self) -> None:
        try:
            self._storage.save(self._state)
        except StorageError as e:
            self.persistence_error = str(e)
            self._audit.log_persistence_failed("save", str(e))
            if isinstance(e, PersistenceUnavailableError):
                raise
            raise PersistenceUnavailableError(str(e)) from e

        self.persistence_error = None
        for callback in self._commit_listeners:
            callback()

    def current_date(self) -> date:
        return self._clock()

    def snapshot(self) -> LedgerState:
        """A deep copy of the current state."""
        return self._state.model_copy(deep=True)

    def _today(self, today: Optional[date]) -> date:
        return today or self._clock()

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def expenses(self) -> list[Expense]:
        return list(self._state.expenses)

    @property
    def incomes(self) -> list[Income]:
        return list(self._state.incomes)

    @property
    def savings_goals(self) -> list[SavingsGoal]:
        return list(self._state.savings_goals)

    @property
    def subscriptions(self) -> list[Subscription]:
        return list(self._state.subscriptions)

    @property
    def budget(self) -> Budget:
        return self._state.budget

    def get_expense(self, expense_id: UUID) -> Expense:
        return self._find(self._state.expenses, expense_id, "expense")[1]

    def get_savings_goal(self, goal_id: UUID) -> SavingsGoal:
        return self._find(self._state.savings_goals, goal_id, "savings_goal")[1]

    def get_subscription(self, subscription_id: UUID) -> Subscription:
        return self._find(self._state.subscriptions, subscription_id, "subscription")[1]

    @staticmethod
    def _find(records: list[T], record_id: UUID, entity_type: str) -> tuple[int, T]:
        for index, record in enumerate(records):
            if record.id == record_id:
                return index, record
        raise RecordNotFoundError(entity_type, record_id)

    # -------------------------------------------------------------------------
    # Generic CRUD
    # -------------------------------------------------------------------------

    def _add(self, records: list[T], record: T, entity_type: str, title: str) -> T:
        records.append(record)
        self._audit.log_record_added(entity_type, record.id, title)
        self._commit()
        return record

    def _update(self, records: list[T], record: T, entity_type: str) -> T:
        index, _ = self._find(records, record.id, entity_type)
        records[index] = record
        self._audit.log_record_updated(entity_type, record.id)
        self._commit()
        return record

    def _delete(self, records: list[T], record_id: UUID, entity_type: str) -> bool:
        for index, record in enumerate(records):
            if record.id == record_id:
                del records[index]
                self._audit.log_record_deleted(entity_type, record_id)
                self._commit()
                return True
        return False

    def add_expense(self, expense: Expense) -> Expense:
        return self._add(self._state.expenses, expense, "expense", expense.title)

    def update_expense(self, expense: Expense) -> Expense:
        return self._update(self._state.expenses, expense, "expense")

    def delete_expense(self, expense_id: UUID) -> bool:
        return self._delete(self._state.expenses, expense_id, "expense")

    def add_income(self, income: Income) -> Income:
        return self._add(self._state.incomes, income, "income", income.title)

    def update_income(self, income: Income) -> Income:
        return self._update(self._state.incomes, income, "income")

    def delete_income(self, income_id: UUID) -> bool:
        return self._delete(self._state.incomes, income_id, "income")

    def add_savings_goal(self, goal: SavingsGoal) -> SavingsGoal:
        return self._add(self._state.savings_goals, goal, "savings_goal", goal.title)

    def update_savings_goal(self, goal: SavingsGoal) -> SavingsGoal:
        return self._update(self._state.savings_goals, goal, "savings_goal")

    def delete_savings_goal(self, goal_id: UUID) -> bool:
        return self._delete(self._state.savings_goals, goal_id, "savings_goal")

    def add_subscription(self, subscription: Subscription) -> Subscription:
        return self._add(self._state.subscriptions, subscription, "subscription", subscription.name)

    def update_subscription(self, subscription: Subscription) -> Subscription:
        return self._update(self._state.subscriptions, subscription, "subscription")

    def delete_subscription(self, subscription_id: UUID) -> bool:
        return self._delete(self._state.subscriptions, subscription_id, "subscription")

    # -------------------------------------------------------------------------
    # Savings contributions
    # -------------------------------------------------------------------------

    @staticmethod
    def _rebuild_goal(goal: SavingsGoal, contributions: list[SavingsContribution]) -> SavingsGoal:
        data = goal.model_dump(exclude={"current_amount", "contributions"})
        return SavingsGoal(**data, contributions=contributions)

    def add_contribution(
        self,
        goal_id: UUID,
        amount: Decimal,
        notes: Optional[str] = None,
        on: Optional[date] = None,
    ) -> SavingsContribution:
        index, goal = self._find(self._state.savings_goals, goal_id, "savings_goal")
        contribution = SavingsContribution(amount=amount, notes=notes, date=self._today(on))
        # Build the new goal fully before swapping it in
        self._state.savings_goals[index] = self._rebuild_goal(
            goal, [*goal.contributions, contribution]
        )
        self._audit.log_contribution(goal_id, contribution.id, str(contribution.amount))
        self._commit()
        return contribution

    def remove_contribution(self, goal_id: UUID, contribution_id: UUID) -> bool:
        index, goal = self._find(self._state.savings_goals, goal_id, "savings_goal")
        remaining = [c for c in goal.contributions if c.id != contribution_id]
        if len(remaining) == len(goal.contributions):
            return False

        removed = next(c for c in goal.contributions if c.id == contribution_id)
        self._state.savings_goals[index] = self._rebuild_goal(goal, remaining)
        self._audit.log_contribution(goal_id, contribution_id, str(removed.amount), removed=True)
        self._commit()
        return True

    # -------------------------------------------------------------------------
    # Budget
    # -------------------------------------------------------------------------

    def _replace_budget(self, budget: Budget, changes: dict) -> Budget:
        self._state.budget = budget
        self._audit.log_budget_updated(changes)
        self._commit()
        return budget

    def _budget_with(self, **changes) -> Budget:
        return Budget.model_validate({**self._state.budget.model_dump(), **changes})

    def update_budget(self, budget: Budget) -> Budget:
        return self._replace_budget(budget, {"replaced": True})

    def set_monthly_limit(self, limit: Decimal) -> Budget:
        budget = self._budget_with(monthly_limit=limit)
        return self._replace_budget(budget, {"monthly_limit": str(budget.monthly_limit)})

    def set_currency(self, currency: CurrencyCode) -> Budget:
        budget = self._budget_with(currency=currency)
        return self._replace_budget(budget, {"currency": budget.currency.value})

    def set_category_limit(
        self,
        category: ExpenseCategory,
        limit: Optional[Decimal],
    ) -> Budget:
        """Set a per-category limit, or remove it with ``None``."""
        budget = self._state.budget.set_limit(category, limit)
        return self._replace_budget(budget, {
            "category": category.value,
            "limit": str(limit) if limit is not None else None,
        })

    def set_rollover_enabled(self, enabled: bool) -> Budget:
        """Turning rollover off forgets the carried amount and its period."""
        changes: dict = {"rollover_enabled": enabled}
        if not enabled:
            changes.update(rollover_amount=ZERO, last_rollover_period=None)
        budget = self._budget_with(**changes)
        return self._replace_budget(budget, {"rollover_enabled": enabled})

    def check_and_apply_rollover(self, today: Optional[date] = None) -> bool:
        """
        Compute this month's rollover from last month's spend.

        Returns True if the rollover was (re)computed, False if it was
        disabled or already applied for the current month.
        """
        today = self._today(today)
        budget = self._state.budget
        previous_spend = aggregation.period_total(
            self._state.expenses,
            aggregation.month_range(aggregation.previous_month(today)),
        )
        current_period = aggregation.period_key(today)
        updated = aggregation.apply_rollover(budget, previous_spend, current_period)
        if updated is budget:
            return False

        self._state.budget = updated
        self._audit.log_rollover_applied(
            current_period,
            str(updated.rollover_amount),
            str(previous_spend),
        )
        self._commit()
        return True

    def reset_rollover(self) -> Budget:
        self._state.budget = self._budget_with(rollover_amount=ZERO, last_rollover_period=None)
        self._audit.log_rollover_reset()
        self._commit()
        return self._state.budget

    # -------------------------------------------------------------------------
    # Recurring payments
    # -------------------------------------------------------------------------

    def mark_recurring_expense_paid(
        self,
        expense_id: UUID,
        today: Optional[date] = None,
    ) -> Expense:
        """
        Record a one-time payment of a recurring expense dated today
        and move its next due date one period past today.
        """
        today = self._today(today)
        index, template = self._find(self._state.expenses, expense_id, "expense")
        if template.recurrence is None:
            raise NotRecurringError(f"Expense {expense_id} is not recurring")

        paid = Expense(
            title=template.title,
            amount=template.amount,
            category=template.category,
            date=today,
            notes=template.notes,
        )
        self._state.expenses.append(paid)
        next_due = aggregation.advance_recurrence(today, template.recurrence)
        self._state.expenses[index] = template.model_copy(update={"next_due_date": next_due})

        self._audit.log_record_added("expense", paid.id, paid.title)
        self._audit.log_recurring_advanced("expense", expense_id, next_due.isoformat(), paid=True)
        self._commit()
        return paid

    def skip_recurring_expense(
        self,
        expense_id: UUID,
        today: Optional[date] = None,
    ) -> date:
        """Move the next due date forward without recording a payment."""
        today = self._today(today)
        index, template = self._find(self._state.expenses, expense_id, "expense")
        if template.recurrence is None:
            raise NotRecurringError(f"Expense {expense_id} is not recurring")

        next_due = aggregation.advance_recurrence(today, template.recurrence)
        self._state.expenses[index] = template.model_copy(update={"next_due_date": next_due})
        self._audit.log_recurring_advanced("expense", expense_id, next_due.isoformat(), paid=False)
        self._commit()
        return next_due

    def mark_subscription_paid(
        self,
        subscription_id: UUID,
        today: Optional[date] = None,
    ) -> Expense:
        """Record the payment as an expense and advance the billing date."""
        today = self._today(today)
        index, subscription = self._find(
            self._state.subscriptions, subscription_id, "subscription"
        )
        payment = Expense(
            title=subscription.name,
            amount=subscription.amount,
            category=subscription.category,
            date=today,
            notes=translate("subscription_payment", self._settings.language),
        )
        self._state.expenses.append(payment)
        next_billing = aggregation.advance_recurrence(today, subscription.recurrence)
        self._state.subscriptions[index] = subscription.model_copy(
            update={"next_billing_date": next_billing}
        )

        self._audit.log_record_added("expense", payment.id, payment.title)
        self._audit.log_recurring_advanced(
            "subscription", subscription_id, next_billing.isoformat(), paid=True
        )
        self._commit()
        return payment

    def toggle_subscription_active(self, subscription_id: UUID) -> Subscription:
        index, subscription = self._find(
            self._state.subscriptions, subscription_id, "subscription"
        )
        toggled = subscription.model_copy(update={"is_active": not subscription.is_active})
        self._state.subscriptions[index] = toggled
        self._audit.log_record_updated("subscription", subscription_id)
        self._commit()
        return toggled

    # -------------------------------------------------------------------------
    # Monthly budget figures
    # -------------------------------------------------------------------------

    def this_month_expenses(self, today: Optional[date] = None) -> list[Expense]:
        return aggregation.filter_records(
            self._state.expenses, aggregation.month_range(self._today(today))
        )

    def total_spent_this_month(self, today: Optional[date] = None) -> Decimal:
        return aggregation.period_total(
            self._state.expenses, aggregation.month_range(self._today(today))
        )

    def effective_limit(self) -> Decimal:
        return aggregation.effective_limit(self._state.budget)

    def remaining_budget(self, today: Optional[date] = None) -> Decimal:
        """Monthly limit minus this month's spend, ignoring rollover."""
        return self._state.budget.monthly_limit - self.total_spent_this_month(today)

    def remaining_with_rollover(self, today: Optional[date] = None) -> Decimal:
        return self.effective_limit() - self.total_spent_this_month(today)

    def budget_progress(self, today: Optional[date] = None) -> float:
        return aggregation.budget_progress(
            self.total_spent_this_month(today), self.effective_limit()
        )

    def is_over_budget(self, today: Optional[date] = None) -> bool:
        return self.total_spent_this_month(today) > self.effective_limit()

    def rollover_status(self) -> str:
        """Message key describing the sign of the current rollover."""
        amount = self._state.budget.rollover_amount
        if amount > 0:
            return "rollover_positive"
        if amount < 0:
            return "rollover_negative"
        return "rollover_none"

    def expenses_by_category(self, today: Optional[date] = None) -> dict[ExpenseCategory, Decimal]:
        return aggregation.group_by_category(
            self._state.expenses, aggregation.month_range(self._today(today))
        )

    def category_spent_this_month(
        self,
        category: ExpenseCategory,
        today: Optional[date] = None,
    ) -> Decimal:
        return self.expenses_by_category(today).get(category, ZERO)

    def category_budget_progress(
        self,
        category: ExpenseCategory,
        today: Optional[date] = None,
    ) -> float:
        limit = self._state.budget.limit_for(category)
        if limit is None:
            return 0.0
        return aggregation.budget_progress(self.category_spent_this_month(category, today), limit)

    def is_category_over_budget(
        self,
        category: ExpenseCategory,
        today: Optional[date] = None,
    ) -> bool:
        limit = self._state.budget.limit_for(category)
        if limit is None:
            return False
        return self.category_spent_this_month(category, today) > limit

    def category_remaining_budget(
        self,
        category: ExpenseCategory,
        today: Optional[date] = None,
    ) -> Optional[Decimal]:
        limit = self._state.budget.limit_for(category)
        if limit is None:
            return None
        return limit - self.category_spent_this_month(category, today)

    # -------------------------------------------------------------------------
    # Income
    # -------------------------------------------------------------------------

    def this_month_incomes(self, today: Optional[date] = None) -> list[Income]:
        return aggregation.filter_records(
            self._state.incomes, aggregation.month_range(self._today(today))
        )

    def total_income_this_month(self, today: Optional[date] = None) -> Decimal:
        return aggregation.period_total(
            self._state.incomes, aggregation.month_range(self._today(today))
        )

    def net_balance_this_month(self, today: Optional[date] = None) -> Decimal:
        return self.total_income_this_month(today) - self.total_spent_this_month(today)

    # -------------------------------------------------------------------------
    # Recent and recurring
    # -------------------------------------------------------------------------

    def recent_expenses(self, limit: int = 5) -> list[Expense]:
        return sorted(self._state.expenses, key=lambda e: e.date, reverse=True)[:limit]

    def recent_incomes(self, limit: int = 5) -> list[Income]:
        return sorted(self._state.incomes, key=lambda i: i.date, reverse=True)[:limit]

    def recurring_expenses(self) -> list[Expense]:
        return [e for e in self._state.expenses if e.is_recurring]

    def upcoming_recurring_expenses(self, today: Optional[date] = None) -> list[Expense]:
        today = self._today(today)
        horizon = today + timedelta(days=self._settings.upcoming_window_days)
        upcoming = [
            e for e in self.recurring_expenses()
            if e.next_due_date is not None and today <= e.next_due_date <= horizon
        ]
        return sorted(upcoming, key=lambda e: e.next_due_date)

    def monthly_recurring_total(self) -> Decimal:
        """Recurring expenses normalized to a monthly cost."""
        return sum(
            (aggregation.monthly_equivalent(e.amount, e.recurrence) for e in self.recurring_expenses()),
            ZERO,
        )

    # -------------------------------------------------------------------------
    # Savings
    # -------------------------------------------------------------------------

    def total_savings(self) -> Decimal:
        return sum((g.current_amount for g in self._state.savings_goals), ZERO)

    def active_savings_goals(self) -> list[SavingsGoal]:
        return [g for g in self._state.savings_goals if not g.is_completed]

    def completed_savings_goals(self) -> list[SavingsGoal]:
        return [g for g in self._state.savings_goals if g.is_completed]

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def active_subscriptions(self) -> list[Subscription]:
        return [s for s in self._state.subscriptions if s.is_active]

    def total_monthly_subscriptions(self) -> Decimal:
        return sum((s.monthly_cost for s in self.active_subscriptions()), ZERO)

    def total_yearly_subscriptions(self) -> Decimal:
        exact = sum((s.exact_monthly_cost for s in self.active_subscriptions()), ZERO)
        return quantize_amount(exact * 12)

    def upcoming_subscriptions(self, today: Optional[date] = None) -> list[Subscription]:
        today = self._today(today)
        window = self._settings.upcoming_window_days
        due = [s for s in self.active_subscriptions() if s.is_due_soon(today, window)]
        return sorted(due, key=lambda s: s.next_billing_date)

    def overdue_subscriptions(self, today: Optional[date] = None) -> list[Subscription]:
        today = self._today(today)
        return [s for s in self.active_subscriptions() if s.is_overdue(today)]

    def subscriptions_by_category(self) -> dict[ExpenseCategory, Decimal]:
        result: dict[ExpenseCategory, Decimal] = {}
        for subscription in self.active_subscriptions():
            result[subscription.category] = (
                result.get(subscription.category, ZERO) + subscription.monthly_cost
            )
        return result

    def due_reminders(self, today: Optional[date] = None) -> list[Reminder]:
        """Recurring expenses and subscriptions to remind the user about."""
        return reminders.due_reminders(
            self._state.expenses,
            self._state.subscriptions,
            self._today(today),
            self._settings.upcoming_window_days,
        )

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search(
        self,
        query: str,
        kind: SearchKind = SearchKind.ALL,
        language: Optional[str] = None,
    ) -> SearchResults:
        return search_records(
            query,
            kind,
            self._state.expenses,
            self._state.incomes,
            self._state.savings_goals,
            self._state.subscriptions,
            language=language or self._settings.language,
        )

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def expenses_for(self, period: Period, today: Optional[date] = None) -> list[Expense]:
        date_range = aggregation.resolve_range(period, self._today(today))
        return aggregation.filter_records(self._state.expenses, date_range)

    def total_spent_for(self, period: Period, today: Optional[date] = None) -> Decimal:
        date_range = aggregation.resolve_range(period, self._today(today))
        return aggregation.period_total(self._state.expenses, date_range)

    def incomes_for(self, period: Period, today: Optional[date] = None) -> list[Income]:
        date_range = aggregation.resolve_range(period, self._today(today))
        return aggregation.filter_records(self._state.incomes, date_range)

    def total_income_for(self, period: Period, today: Optional[date] = None) -> Decimal:
        date_range = aggregation.resolve_range(period, self._today(today))
        return aggregation.period_total(self._state.incomes, date_range)

    def category_totals_for(
        self,
        period: Period,
        today: Optional[date] = None,
    ) -> dict[ExpenseCategory, Decimal]:
        date_range = aggregation.resolve_range(period, self._today(today))
        return aggregation.group_by_category(self._state.expenses, date_range)

    def category_breakdown(
        self,
        period: Period,
        today: Optional[date] = None,
    ) -> list[CategoryBreakdown]:
        """Category totals for the period, largest first."""
        totals = self.category_totals_for(period, today)
        return [
            CategoryBreakdown(category=category, amount=amount)
            for category, amount in aggregation.top_categories(totals, limit=len(totals))
        ]

    def daily_spending(
        self,
        days: Optional[int] = None,
        today: Optional[date] = None,
    ) -> list[DailySpending]:
        days = days if days is not None else self._settings.trend_days
        return aggregation.daily_series(self._state.expenses, days, self._today(today))

    def monthly_spending(
        self,
        months: Optional[int] = None,
        today: Optional[date] = None,
    ) -> list[MonthlySpending]:
        months = months if months is not None else self._settings.trend_months
        return aggregation.monthly_series(self._state.expenses, months, self._today(today))

    def average_daily_spending(
        self,
        days: Optional[int] = None,
        today: Optional[date] = None,
    ) -> Decimal:
        days = days if days is not None else self._settings.trend_days
        return aggregation.average_daily(self._state.expenses, days, self._today(today))

    def available_months(self) -> list[date]:
        return aggregation.available_months(self._state.expenses)

    def expenses_in_month(self, month: date) -> list[Expense]:
        return aggregation.filter_records(self._state.expenses, aggregation.month_range(month))

    def total_spent_in_month(self, month: date) -> Decimal:
        return aggregation.period_total(self._state.expenses, aggregation.month_range(month))

    def spent_on(self, day: Optional[date] = None) -> Decimal:
        """Total spent on a single day (today by default)."""
        day = self._today(day)
        return sum((e.amount for e in self._state.expenses if e.date == day), ZERO)

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def reset_all(self) -> None:
        self._state = LedgerState()
        self._audit.log(AuditEventBuilder.ledger_reset())
        self._commit()

    def load_sample_data(self, today: Optional[date] = None) -> list[Expense]:
        """Replace expenses with a handful of recent examples."""
        today = self._today(today)
        samples = [
            ("Coffee", "5.50", ExpenseCategory.FOOD, 0),
            ("Gas", "45.00", ExpenseCategory.TRANSPORTATION, 1),
            ("Netflix", "15.99", ExpenseCategory.ENTERTAINMENT, 2),
            ("Groceries", "125.75", ExpenseCategory.FOOD, 3),
            ("Electricity", "89.00", ExpenseCategory.UTILITIES, 4),
        ]
        self._state.expenses = [
            Expense(
                title=title,
                amount=Decimal(amount),
                category=category,
                date=today - timedelta(days=days_ago),
            )
            for title, amount, category, days_ago in samples
        ]
        self._commit()
        return list(self._state.expenses)
