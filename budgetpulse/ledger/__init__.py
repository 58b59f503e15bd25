"""Ledger package: pure aggregation plus the stateful store."""

from budgetpulse.ledger.aggregation import (
    DateFilter,
    advance_recurrence,
    apply_rollover,
    budget_progress,
    daily_series,
    group_by_category,
    monthly_series,
    period_key,
    period_total,
)
from budgetpulse.ledger.errors import (
    FeatureLockedError,
    LedgerError,
    NotRecurringError,
    RecordNotFoundError,
)
from budgetpulse.ledger.export import expenses_to_csv
from budgetpulse.ledger.search import SearchKind, SearchResults
from budgetpulse.ledger.store import LedgerStore

__all__ = [
    "DateFilter",
    "FeatureLockedError",
    "LedgerError",
    "LedgerStore",
    "NotRecurringError",
    "RecordNotFoundError",
    "SearchKind",
    "SearchResults",
    "advance_recurrence",
    "apply_rollover",
    "budget_progress",
    "daily_series",
    "expenses_to_csv",
    "group_by_category",
    "monthly_series",
    "period_key",
    "period_total",
]
