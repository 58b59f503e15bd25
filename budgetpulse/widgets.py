"""
Home-screen widget snapshot.

The widget process cannot run the ledger, so after every change the app
writes a small, flat summary it can render directly.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from budgetpulse.ledger import aggregation
from budgetpulse.ledger.store import LedgerStore


class WidgetCategory(BaseModel):
    name: str
    amount: Decimal
    icon: str
    color: str


class WidgetSubscription(BaseModel):
    name: str
    amount: Decimal
    days_until: int
    icon: str


class WidgetSnapshot(BaseModel):
    spent_this_month: Decimal
    monthly_limit: Decimal
    # Monthly limit plus any rollover carried into this month
    effective_limit: Decimal
    today_spending: Decimal
    total_savings: Decimal
    savings_goal_progress: float = Field(ge=0.0, le=1.0)
    currency_symbol: str
    category_breakdown: list[WidgetCategory] = Field(default_factory=list)
    upcoming_subscriptions: list[WidgetSubscription] = Field(default_factory=list)
    monthly_subscriptions: Decimal

    @property
    def budget_progress(self) -> float:
        return aggregation.budget_progress(self.spent_this_month, self.effective_limit)


def build_snapshot(store: LedgerStore, today: Optional[date] = None) -> WidgetSnapshot:
    """Summarize the ledger for the widget: top 5 categories, next 3 subscriptions."""
    today = today or store.current_date()
    active_goals = store.active_savings_goals()
    if active_goals:
        goal_progress = sum(g.progress for g in active_goals) / len(active_goals)
    else:
        goal_progress = 0.0

    categories = [
        WidgetCategory(
            name=category.value,
            amount=amount,
            icon=category.icon,
            color=category.color,
        )
        for category, amount in aggregation.top_categories(store.expenses_by_category(today), 5)
    ]
    subscriptions = [
        WidgetSubscription(
            name=s.name,
            amount=s.amount,
            days_until=s.days_until_billing(today),
            icon=s.category.icon,
        )
        for s in store.upcoming_subscriptions(today)[:3]
    ]

    return WidgetSnapshot(
        spent_this_month=store.total_spent_this_month(today),
        monthly_limit=store.budget.monthly_limit,
        effective_limit=store.effective_limit(),
        today_spending=store.spent_on(today),
        total_savings=store.total_savings(),
        savings_goal_progress=goal_progress,
        currency_symbol=store.budget.currency.symbol,
        category_breakdown=categories,
        upcoming_subscriptions=subscriptions,
        monthly_subscriptions=store.total_monthly_subscriptions(),
    )


def write_snapshot(snapshot: WidgetSnapshot, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
