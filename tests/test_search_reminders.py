"""Tests for ledger search and payment reminders."""

from datetime import date, timedelta
from decimal import Decimal

from budgetpulse.ledger import SearchKind
from budgetpulse.models.records import (
    Expense,
    ExpenseCategory,
    Income,
    RecurrenceType,
    SavingsGoal,
    Subscription,
)
from budgetpulse.reminders import ReminderKind, due_reminders


TODAY = date(2024, 6, 15)


def populate(store):
    store.add_expense(Expense(title="Coffee beans", amount=Decimal("12"), date=date(2024, 6, 2),
                              category=ExpenseCategory.FOOD))
    store.add_expense(Expense(title="Bus pass", amount=Decimal("40"), date=date(2024, 6, 10),
                              category=ExpenseCategory.TRANSPORTATION, notes="monthly coffee-free pass"))
    store.add_expense(Expense(title="Pizza", amount=Decimal("18"), date=date(2024, 6, 12),
                              category=ExpenseCategory.FOOD))
    store.add_income(Income(title="Coffee shop shift", amount=Decimal("120"), date=date(2024, 6, 8)))
    store.add_savings_goal(SavingsGoal(title="Espresso machine", target_amount=Decimal("400")))
    store.add_subscription(Subscription(name="Coffee club", amount=Decimal("25")))


class TestSearch:

    def test_matches_title_and_notes_case_insensitively(self, store):
        populate(store)
        results = store.search("COFFEE")

        assert [e.title for e in results.expenses] == ["Bus pass", "Coffee beans"]
        assert [i.title for i in results.incomes] == ["Coffee shop shift"]
        assert [s.name for s in results.subscriptions] == ["Coffee club"]
        assert results.savings_goals == []
        assert results.total == 4

    def test_matches_localized_category(self, store):
        populate(store)
        assert [e.title for e in store.search("food").expenses] == ["Pizza", "Coffee beans"]
        assert [e.title for e in store.search("aliment", language="fr").expenses] == [
            "Pizza", "Coffee beans"
        ]

    def test_kind_narrows_results(self, store):
        populate(store)
        results = store.search("espresso", SearchKind.GOALS)
        assert [g.title for g in results.savings_goals] == ["Espresso machine"]

        results = store.search("coffee", SearchKind.INCOME)
        assert results.expenses == []
        assert len(results.incomes) == 1

    def test_blank_query_matches_nothing(self, store):
        populate(store)
        results = store.search("   ")
        assert results.is_empty
        assert results.query == ""

    def test_no_match(self, store):
        populate(store)
        assert store.search("yacht").is_empty


class TestReminders:

    def test_recurring_expenses_and_subscriptions_in_window(self):
        rent = Expense(title="Rent", amount=Decimal("900"), date=date(2024, 5, 16),
                       recurrence=RecurrenceType.MONTHLY, next_due_date=TODAY + timedelta(days=1))
        one_off = Expense(title="Lamp", amount=Decimal("30"), date=TODAY)
        music = Subscription(name="Music", amount=Decimal("9.99"),
                             next_billing_date=TODAY + timedelta(days=5))

        reminders = due_reminders([rent, one_off], [music], TODAY)

        assert [(r.kind, r.title, r.days_until) for r in reminders] == [
            (ReminderKind.RECURRING_EXPENSE, "Rent", 1),
            (ReminderKind.SUBSCRIPTION, "Music", 5),
        ]
        assert reminders[0].remind_on == TODAY

    def test_excludes_overdue_far_muted_and_paused(self):
        expenses = [
            Expense(title="Late", amount=Decimal("10"), date=date(2024, 5, 1),
                    recurrence=RecurrenceType.MONTHLY, next_due_date=TODAY - timedelta(days=1)),
            Expense(title="Far", amount=Decimal("10"), date=date(2024, 5, 1),
                    recurrence=RecurrenceType.MONTHLY, next_due_date=TODAY + timedelta(days=20)),
        ]
        muted = Subscription(name="Muted", amount=Decimal("5"), reminder_enabled=False,
                             next_billing_date=TODAY + timedelta(days=2))
        paused = Subscription(name="Paused", amount=Decimal("5"), is_active=False,
                              next_billing_date=TODAY + timedelta(days=2))

        assert due_reminders(expenses, [muted, paused], TODAY) == []

    def test_store_uses_upcoming_window(self, store):
        store.add_expense(Expense(title="Insurance", amount=Decimal("80"), date=date(2024, 5, 20),
                                  recurrence=RecurrenceType.MONTHLY, next_due_date=TODAY + timedelta(days=7)))
        store.add_subscription(Subscription(name="Cloud", amount=Decimal("3"),
                                            next_billing_date=TODAY))

        assert [r.title for r in store.due_reminders()] == ["Cloud", "Insurance"]
