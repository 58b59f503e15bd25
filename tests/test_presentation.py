"""Tests for localization, CSV export and the widget snapshot."""

import json
from datetime import date, timedelta
from decimal import Decimal

from budgetpulse.i18n import (
    category_label,
    format_currency,
    format_month_year,
    income_category_label,
    recurrence_label,
    translate,
)
from budgetpulse.ledger import expenses_to_csv
from budgetpulse.models.records import (
    Budget,
    CurrencyCode,
    Expense,
    ExpenseCategory,
    IncomeCategory,
    RecurrenceType,
    SavingsContribution,
    SavingsGoal,
    Subscription,
)
from budgetpulse.widgets import build_snapshot, write_snapshot


TODAY = date(2024, 6, 15)


class TestTranslations:

    def test_labels_in_each_language(self):
        assert category_label(ExpenseCategory.FOOD, "en") == "Food"
        assert category_label(ExpenseCategory.FOOD, "fr") == "Alimentation"
        assert category_label(ExpenseCategory.FOOD, "es") == "Comida"
        assert category_label(ExpenseCategory.FOOD, "pt") == "Alimentação"

    def test_income_and_recurrence_labels(self):
        assert income_category_label(IncomeCategory.SALARY, "en") == "Salary"
        assert recurrence_label(RecurrenceType.BIWEEKLY, "en") == "Every 2 weeks"

    def test_unknown_language_falls_back_to_english(self):
        assert translate("this_month", "de") == "This month"

    def test_unknown_key_returns_key(self):
        assert translate("no_such_key", "fr") == "no_such_key"

    def test_parameters(self):
        text = translate("budget_alert_body", "en", percent=80, remaining="$200.00")
        assert text == "You've used 80% of your budget. $200.00 left."

    def test_every_language_has_every_english_key(self):
        from budgetpulse.i18n import MESSAGES
        for language in ("fr", "es", "pt"):
            assert set(MESSAGES["en"]) <= set(MESSAGES[language])


class TestFormatting:

    def test_format_currency(self):
        assert format_currency(Decimal("1234.5"), CurrencyCode.USD) == "$1,234.50"
        assert format_currency(Decimal("1234.5"), CurrencyCode.EUR) == "1 234,50 €"
        assert format_currency(Decimal("-3"), CurrencyCode.GBP) == "-£3.00"

    def test_format_month_year(self):
        assert format_month_year(date(2024, 6, 1), "en") == "June 2024"
        assert format_month_year(date(2024, 6, 1), "fr") == "Juin 2024"
        assert format_month_year(date(2024, 3, 1), "es") == "Marzo 2024"


class TestCsvExport:

    def test_header_and_order(self):
        expenses = [
            Expense(title="Older", amount=Decimal("5"), date=date(2024, 6, 1), category=ExpenseCategory.FOOD),
            Expense(title="Newer", amount=Decimal("12.5"), date=date(2024, 6, 3),
                    category=ExpenseCategory.TRAVEL, notes="two\nlines"),
        ]
        lines = expenses_to_csv(expenses, "en").splitlines()

        assert lines[0] == "Date,Title,Category,Amount,Notes"
        assert lines[1] == "2024-06-03,Newer,Travel,12.50,two lines"
        assert lines[2] == "2024-06-01,Older,Food,5.00,"

    def test_quotes_commas(self):
        expenses = [Expense(title="Bread, milk", amount=Decimal("4"), date=TODAY)]
        assert '"Bread, milk"' in expenses_to_csv(expenses)

    def test_localized_categories(self):
        expenses = [Expense(title="Pain", amount=Decimal("2"), date=TODAY, category=ExpenseCategory.FOOD)]
        assert ",Alimentation," in expenses_to_csv(expenses, "fr")


class TestWidgetSnapshot:

    def test_build_snapshot(self, store):
        store.add_expense(Expense(title="Dinner", amount=Decimal("40"), date=TODAY,
                                  category=ExpenseCategory.FOOD))
        store.add_expense(Expense(title="Train", amount=Decimal("60"), date=TODAY - timedelta(days=2),
                                  category=ExpenseCategory.TRANSPORTATION))
        store.add_subscription(Subscription(name="Music", amount=Decimal("9.99"),
                                            next_billing_date=TODAY + timedelta(days=3)))
        store.add_savings_goal(SavingsGoal(
            title="Trip",
            target_amount=Decimal("100"),
            contributions=[SavingsContribution(amount=Decimal("25"))],
        ))

        snapshot = build_snapshot(store, TODAY)

        assert snapshot.spent_this_month == Decimal("100")
        assert snapshot.today_spending == Decimal("40")
        assert snapshot.total_savings == Decimal("25")
        assert snapshot.savings_goal_progress == 0.25
        assert snapshot.currency_symbol == "$"
        assert [c.name for c in snapshot.category_breakdown] == ["transportation", "food"]
        assert snapshot.upcoming_subscriptions[0].days_until == 3
        assert snapshot.monthly_subscriptions == Decimal("9.99")
        assert snapshot.budget_progress == 0.1

    def test_progress_includes_rollover(self, store):
        store.update_budget(Budget(
            monthly_limit=Decimal("1000"),
            rollover_enabled=True,
            rollover_amount=Decimal("500"),
            last_rollover_period="2024-06",
        ))
        store.add_expense(Expense(title="Rent", amount=Decimal("300"), date=TODAY))

        snapshot = build_snapshot(store, TODAY)

        assert snapshot.monthly_limit == Decimal("1000")
        assert snapshot.effective_limit == Decimal("1500")
        assert snapshot.budget_progress == 0.2

    def test_write_snapshot(self, store, tmp_path):
        path = tmp_path / "widget" / "widget.json"
        write_snapshot(build_snapshot(store, TODAY), path)
        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["spent_this_month"] == "0"
        assert document["category_breakdown"] == []
