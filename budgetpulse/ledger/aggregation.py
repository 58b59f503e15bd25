"""
Ledger Aggregation

DESIGN DECISION: Every function here is PURE.
They take records and a reference day and return derived values.
No I/O, no clock reads unless ``today`` is omitted, no mutation of inputs.

This keeps the budget math easy to test and lets the store recompute
anything on demand from its in-memory lists.

Date ranges are inclusive on both ends.
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Sequence, TypeVar, Union

from dateutil.relativedelta import relativedelta

from budgetpulse.models.records import (
    Budget,
    DailySpending,
    DateRange,
    Expense,
    ExpenseCategory,
    Income,
    MonthlySpending,
    RecurrenceType,
    quantize_amount,
)


Record = TypeVar("Record", Expense, Income)

ZERO = Decimal("0")


# =============================================================================
# CALENDAR HELPERS
# =============================================================================

def period_key(day: date) -> str:
    """Identifier of the calendar month containing ``day`` ("YYYY-MM")."""
    return day.strftime("%Y-%m")


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_range(day: date) -> DateRange:
    """First through last day of the month containing ``day``."""
    start = month_start(day)
    return DateRange(start=start, end=start + relativedelta(months=1, days=-1))


def previous_month(day: date) -> date:
    """First day of the month before the one containing ``day``."""
    return month_start(day) - relativedelta(months=1)


def advance_recurrence(day: date, unit: RecurrenceType) -> date:
    """
    Next occurrence after ``day``.

    Calendar-aware: months and years are added as calendar units, so
    Jan 31 + 1 month lands on the last day of February rather than in March.
    """
    return day + unit.step


def monthly_equivalent(amount: Decimal, recurrence: Optional[RecurrenceType]) -> Decimal:
    """Normalize one payment to an average month."""
    multiplier = recurrence.monthly_multiplier if recurrence else Decimal("1")
    return quantize_amount(amount * multiplier)


class DateFilter(str, Enum):
    """Preset reporting windows, resolved against a reference day."""
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    LAST_3_MONTHS = "last_3_months"
    LAST_6_MONTHS = "last_6_months"
    THIS_YEAR = "this_year"

    def date_range(self, today: Optional[date] = None) -> DateRange:
        today = today or date.today()
        if self is DateFilter.THIS_MONTH:
            return month_range(today)
        if self is DateFilter.LAST_MONTH:
            return month_range(previous_month(today))
        if self is DateFilter.LAST_3_MONTHS:
            return DateRange(start=today - relativedelta(months=3), end=today)
        if self is DateFilter.LAST_6_MONTHS:
            return DateRange(start=today - relativedelta(months=6), end=today)
        return DateRange(start=today.replace(month=1, day=1), end=today)


Period = Union[DateFilter, DateRange]


def resolve_range(period: Period, today: Optional[date] = None) -> DateRange:
    """Turn a preset or an explicit custom range into a DateRange."""
    if isinstance(period, DateRange):
        return period
    return period.date_range(today)


# =============================================================================
# TOTALS AND GROUPING
# =============================================================================

def filter_records(records: Iterable[Record], date_range: DateRange) -> list[Record]:
    """Records inside the range, newest first."""
    matching = [r for r in records if r.date in date_range]
    matching.sort(key=lambda r: r.date, reverse=True)
    return matching


def period_total(records: Iterable[Union[Expense, Income]], date_range: DateRange) -> Decimal:
    """Sum of amounts for records dated inside the inclusive range."""
    return sum((r.amount for r in records if r.date in date_range), ZERO)


def group_by_category(
    records: Iterable[Expense],
    date_range: DateRange,
) -> dict[ExpenseCategory, Decimal]:
    totals: dict[ExpenseCategory, Decimal] = defaultdict(lambda: ZERO)
    for record in records:
        if record.date in date_range:
            totals[record.category] += record.amount
    return dict(totals)


def available_months(records: Iterable[Union[Expense, Income]]) -> list[date]:
    """First day of every month that has at least one record, newest first."""
    return sorted({month_start(r.date) for r in records}, reverse=True)


# =============================================================================
# BUDGET MATH
# =============================================================================

def effective_limit(budget: Budget) -> Decimal:
    return budget.effective_limit


def budget_progress(spent: Decimal, limit: Decimal) -> float:
    """Share of the limit used, clamped to [0, 1]. A non-positive limit yields 0."""
    if limit <= 0:
        return 0.0
    return max(0.0, min(float(spent / limit), 1.0))


def apply_rollover(
    budget: Budget,
    previous_period_spend: Decimal,
    current_period: str,
) -> Budget:
    """
    Carry last period's unused (or overspent) budget into this period.

    ``rollover_amount = monthly_limit - previous_period_spend`` and may be
    negative. The computation is keyed by ``current_period`` ("YYYY-MM"):
    if the budget already carries that key it is returned unchanged, so
    calling this any number of times within a period has the same effect
    as calling it once. A budget with rollover disabled is returned as is.
    """
    if not budget.rollover_enabled:
        return budget
    if budget.last_rollover_period == current_period:
        return budget

    return Budget.model_validate({
        **budget.model_dump(),
        "rollover_amount": quantize_amount(budget.monthly_limit - previous_period_spend),
        "last_rollover_period": current_period,
    })


# =============================================================================
# TIME SERIES
# =============================================================================

def daily_series(
    records: Iterable[Union[Expense, Income]],
    n_days: int,
    today: Optional[date] = None,
) -> list[DailySpending]:
    """
    One entry per day for the last ``n_days`` days (today included),
    oldest first. Days without records carry a zero amount.
    """
    if n_days <= 0:
        return []
    today = today or date.today()
    first_day = today - timedelta(days=n_days - 1)

    totals: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for record in records:
        if first_day <= record.date <= today:
            totals[record.date] += record.amount

    return [
        DailySpending(day=day, amount=totals.get(day, ZERO))
        for day in (first_day + timedelta(days=offset) for offset in range(n_days))
    ]


def monthly_series(
    records: Iterable[Union[Expense, Income]],
    n_months: int,
    today: Optional[date] = None,
) -> list[MonthlySpending]:
    """One entry per calendar month for the last ``n_months`` months, oldest first."""
    if n_months <= 0:
        return []
    today = today or date.today()
    current = month_start(today)
    first_month = current - relativedelta(months=n_months - 1)

    totals: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for record in records:
        bucket = month_start(record.date)
        if first_month <= bucket <= current:
            totals[bucket] += record.amount

    return [
        MonthlySpending(month=month, amount=totals.get(month, ZERO))
        for month in (first_month + relativedelta(months=offset) for offset in range(n_months))
    ]


def average_daily(
    records: Iterable[Union[Expense, Income]],
    n_days: int,
    today: Optional[date] = None,
) -> Decimal:
    series = daily_series(records, n_days, today)
    if not series:
        return ZERO
    return quantize_amount(sum((d.amount for d in series), ZERO) / len(series))


def top_categories(
    totals: dict[ExpenseCategory, Decimal],
    limit: int = 5,
) -> Sequence[tuple[ExpenseCategory, Decimal]]:
    """Largest categories first; ties broken by category name for stability."""
    ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0].value))
    return ranked[:limit]
