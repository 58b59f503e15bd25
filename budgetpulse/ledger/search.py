"""
Search across the ledger.

A query matches case-insensitively anywhere in a record's text: the
title and notes of expenses and incomes (plus the category name of an
expense, in the interface language), goal titles, and subscription names
and notes. An empty query matches nothing.
"""

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from budgetpulse.i18n import category_label
from budgetpulse.models.records import Expense, Income, SavingsGoal, Subscription


class SearchKind(str, Enum):
    """Which records a search looks at."""
    ALL = "all"
    EXPENSES = "expenses"
    INCOME = "income"
    GOALS = "goals"
    SUBSCRIPTIONS = "subscriptions"


class SearchResults(BaseModel):
    """Matches grouped by record type; dated records newest first."""

    query: str
    expenses: list[Expense] = Field(default_factory=list)
    incomes: list[Income] = Field(default_factory=list)
    savings_goals: list[SavingsGoal] = Field(default_factory=list)
    subscriptions: list[Subscription] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return (
            len(self.expenses)
            + len(self.incomes)
            + len(self.savings_goals)
            + len(self.subscriptions)
        )

    @property
    def is_empty(self) -> bool:
        return self.total == 0


def _matches(needle: str, *fields: Optional[str]) -> bool:
    return any(field and needle in field.casefold() for field in fields)


def search_records(
    query: str,
    kind: SearchKind,
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
    savings_goals: Iterable[SavingsGoal],
    subscriptions: Iterable[Subscription],
    language: Optional[str] = None,
) -> SearchResults:
    needle = query.strip().casefold()
    results = SearchResults(query=query.strip())
    if not needle:
        return results

    if kind in (SearchKind.ALL, SearchKind.EXPENSES):
        results.expenses = sorted(
            (
                e for e in expenses
                if _matches(needle, e.title, e.notes, category_label(e.category, language))
            ),
            key=lambda e: e.date,
            reverse=True,
        )
    if kind in (SearchKind.ALL, SearchKind.INCOME):
        results.incomes = sorted(
            (i for i in incomes if _matches(needle, i.title, i.notes)),
            key=lambda i: i.date,
            reverse=True,
        )
    if kind in (SearchKind.ALL, SearchKind.GOALS):
        results.savings_goals = [g for g in savings_goals if _matches(needle, g.title)]
    if kind in (SearchKind.ALL, SearchKind.SUBSCRIPTIONS):
        results.subscriptions = [
            s for s in subscriptions if _matches(needle, s.name, s.notes)
        ]
    return results
