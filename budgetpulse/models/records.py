"""
Core Ledger Models for BudgetPulse

These models define the strict schemas for every record the ledger keeps.
They are designed to:
1. Enforce non-negative amounts at the boundary
2. Provide clear validation error messages
3. Be serializable for persistence (plain JSON through pydantic)
4. Carry the small derived values the screens need

DESIGN DECISION: Money is always Decimal with two decimal places.
Floats never enter the ledger; presentation code converts at the edge.

NOTE: Record dates are named ``date`` to match the persisted format, so
the datetime module is imported as ``dt`` to keep the type reachable
inside class bodies.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Annotated, Optional
from uuid import UUID, uuid4

from dateutil.relativedelta import relativedelta
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


CENTS = Decimal("0.01")

Amount = Annotated[Decimal, Field(ge=0, decimal_places=2)]


def quantize_amount(value: Decimal) -> Decimal:
    """Round a computed amount to cents."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Spending categories.

    DESIGN DECISION: A closed set rather than free text keeps per-category
    budgets and reports stable.
    """
    FOOD = "food"
    TRANSPORTATION = "transportation"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    UTILITIES = "utilities"
    HEALTHCARE = "healthcare"
    EDUCATION = "education"
    TRAVEL = "travel"
    OTHER = "other"

    @property
    def icon(self) -> str:
        return _EXPENSE_ICONS[self]

    @property
    def color(self) -> str:
        return _EXPENSE_COLORS[self]


_EXPENSE_ICONS = {
    ExpenseCategory.FOOD: "fork.knife",
    ExpenseCategory.TRANSPORTATION: "car.fill",
    ExpenseCategory.ENTERTAINMENT: "tv.fill",
    ExpenseCategory.SHOPPING: "bag.fill",
    ExpenseCategory.UTILITIES: "bolt.fill",
    ExpenseCategory.HEALTHCARE: "heart.fill",
    ExpenseCategory.EDUCATION: "book.fill",
    ExpenseCategory.TRAVEL: "airplane",
    ExpenseCategory.OTHER: "ellipsis.circle.fill",
}

_EXPENSE_COLORS = {
    ExpenseCategory.FOOD: "orange",
    ExpenseCategory.TRANSPORTATION: "blue",
    ExpenseCategory.ENTERTAINMENT: "purple",
    ExpenseCategory.SHOPPING: "pink",
    ExpenseCategory.UTILITIES: "yellow",
    ExpenseCategory.HEALTHCARE: "red",
    ExpenseCategory.EDUCATION: "green",
    ExpenseCategory.TRAVEL: "cyan",
    ExpenseCategory.OTHER: "gray",
}


class IncomeCategory(str, Enum):
    """Income sources."""
    SALARY = "salary"
    FREELANCE = "freelance"
    INVESTMENT = "investment"
    GIFT = "gift"
    REFUND = "refund"
    OTHER = "other"


class RecurrenceType(str, Enum):
    """
    Cadence of a recurring expense, income, or subscription.

    The monthly multiplier normalizes one payment to an average month
    (4.33 weeks per month).
    """
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def step(self) -> relativedelta:
        """Calendar step between two occurrences."""
        return _RECURRENCE_STEPS[self]

    @property
    def monthly_multiplier(self) -> Decimal:
        return _MONTHLY_MULTIPLIERS[self]


_RECURRENCE_STEPS = {
    RecurrenceType.WEEKLY: relativedelta(weeks=1),
    RecurrenceType.BIWEEKLY: relativedelta(weeks=2),
    RecurrenceType.MONTHLY: relativedelta(months=1),
    RecurrenceType.YEARLY: relativedelta(years=1),
}

_MONTHLY_MULTIPLIERS = {
    RecurrenceType.WEEKLY: Decimal("4.33"),
    RecurrenceType.BIWEEKLY: Decimal("2.17"),
    RecurrenceType.MONTHLY: Decimal("1"),
    RecurrenceType.YEARLY: Decimal("1") / Decimal("12"),
}


class CurrencyCode(str, Enum):
    """Supported display currencies."""
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CAD = "CAD"
    MXN = "MXN"

    @property
    def symbol(self) -> str:
        return _CURRENCY_SYMBOLS[self]

    @property
    def locale(self) -> str:
        return _CURRENCY_LOCALES[self]


_CURRENCY_SYMBOLS = {
    CurrencyCode.USD: "$",
    CurrencyCode.EUR: "€",
    CurrencyCode.GBP: "£",
    CurrencyCode.CAD: "CA$",
    CurrencyCode.MXN: "MX$",
}

_CURRENCY_LOCALES = {
    CurrencyCode.USD: "en_US",
    CurrencyCode.EUR: "fr_FR",
    CurrencyCode.GBP: "en_GB",
    CurrencyCode.CAD: "en_CA",
    CurrencyCode.MXN: "es_MX",
}


# =============================================================================
# RECORDS
# =============================================================================

class Expense(BaseModel):
    """
    A single expense.

    A recurring expense is a template: ``recurrence`` says how often it
    repeats and ``next_due_date`` says when it is next owed. Paying it
    records a separate one-time expense.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    title: str = Field(..., min_length=1, max_length=200)
    amount: Amount
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: dt.date = Field(default_factory=dt.date.today)
    notes: Optional[str] = Field(default=None, max_length=1000)
    recurrence: Optional[RecurrenceType] = None
    next_due_date: Optional[dt.date] = None
    receipt_ref: Optional[str] = Field(
        default=None,
        description="Reference to a stored receipt image"
    )

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None


class Income(BaseModel):
    """A single income entry."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    title: str = Field(..., min_length=1, max_length=200)
    amount: Amount
    category: IncomeCategory = IncomeCategory.OTHER
    date: dt.date = Field(default_factory=dt.date.today)
    recurrence: Optional[RecurrenceType] = None
    notes: Optional[str] = Field(default=None, max_length=1000)

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None


class SavingsContribution(BaseModel):
    """Money put towards a savings goal."""

    id: UUID = Field(default_factory=uuid4)
    amount: Amount
    date: dt.date = Field(default_factory=dt.date.today)
    notes: Optional[str] = Field(default=None, max_length=500)


class SavingsGoal(BaseModel):
    """
    A savings target.

    CRITICAL: ``current_amount`` always equals the sum of the contributions.
    It is derived on construction when omitted and rejected when it
    disagrees, so a goal can never be persisted in an inconsistent state.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    title: str = Field(..., min_length=1, max_length=200)
    target_amount: Amount
    current_amount: Optional[Amount] = None
    target_date: Optional[dt.date] = None
    icon: str = "star.fill"
    color: str = "blue"
    contributions: list[SavingsContribution] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_current_amount(self) -> "SavingsGoal":
        total = sum((c.amount for c in self.contributions), Decimal("0"))
        if self.current_amount is None:
            self.current_amount = total
        elif self.current_amount != total:
            raise ValueError(
                f"current_amount {self.current_amount} does not match "
                f"contributions total {total}"
            )
        return self

    @property
    def progress(self) -> float:
        if self.target_amount <= 0:
            return 0.0
        return min(float(self.current_amount / self.target_amount), 1.0)

    @property
    def is_completed(self) -> bool:
        return self.current_amount >= self.target_amount

    @property
    def remaining_amount(self) -> Decimal:
        return max(self.target_amount - self.current_amount, Decimal("0"))

    def days_remaining(self, today: Optional[dt.date] = None) -> Optional[int]:
        if self.target_date is None:
            return None
        today = today or dt.date.today()
        return max((self.target_date - today).days, 0)

    def suggested_monthly_contribution(
        self,
        today: Optional[dt.date] = None,
    ) -> Optional[Decimal]:
        """Remaining amount spread over the whole months left (at least one)."""
        if self.target_date is None:
            return None
        today = today or dt.date.today()
        delta = relativedelta(self.target_date, today)
        months_left = max(delta.years * 12 + delta.months, 1)
        return quantize_amount(self.remaining_amount / months_left)


class Subscription(BaseModel):
    """A recurring bill the user wants to keep an eye on."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=200)
    amount: Amount
    recurrence: RecurrenceType = RecurrenceType.MONTHLY
    category: ExpenseCategory = ExpenseCategory.UTILITIES
    next_billing_date: dt.date = Field(default_factory=dt.date.today)
    start_date: dt.date = Field(default_factory=dt.date.today)
    is_active: bool = True
    notes: Optional[str] = Field(default=None, max_length=1000)
    reminder_enabled: bool = True

    @property
    def exact_monthly_cost(self) -> Decimal:
        """Monthly cost before rounding to cents."""
        return self.amount * self.recurrence.monthly_multiplier

    @property
    def monthly_cost(self) -> Decimal:
        return quantize_amount(self.exact_monthly_cost)

    @property
    def yearly_cost(self) -> Decimal:
        return quantize_amount(self.exact_monthly_cost * 12)

    def days_until_billing(self, today: Optional[dt.date] = None) -> int:
        today = today or dt.date.today()
        return (self.next_billing_date - today).days

    def is_due_soon(self, today: Optional[dt.date] = None, window_days: int = 7) -> bool:
        return 0 <= self.days_until_billing(today) <= window_days

    def is_overdue(self, today: Optional[dt.date] = None) -> bool:
        return self.days_until_billing(today) < 0


class Budget(BaseModel):
    """
    Monthly budget settings.

    ``rollover_amount`` may be negative: overspending last month shrinks
    this month's effective limit. ``last_rollover_period`` holds the
    "YYYY-MM" key of the month the rollover was last computed for.
    """

    monthly_limit: Amount = Decimal("1000.00")
    currency: CurrencyCode = CurrencyCode.USD
    category_limits: dict[ExpenseCategory, Amount] = Field(default_factory=dict)
    rollover_enabled: bool = False
    rollover_amount: Decimal = Field(default=Decimal("0"), decimal_places=2)
    last_rollover_period: Optional[str] = Field(
        default=None,
        pattern=r"^\d{4}-\d{2}$",
    )

    @property
    def effective_limit(self) -> Decimal:
        if self.rollover_enabled:
            return self.monthly_limit + self.rollover_amount
        return self.monthly_limit

    def limit_for(self, category: ExpenseCategory) -> Optional[Decimal]:
        return self.category_limits.get(category)

    def set_limit(
        self,
        category: ExpenseCategory,
        limit: Optional[Decimal],
    ) -> "Budget":
        """Return a copy with the category limit set, or removed when None."""
        limits = dict(self.category_limits)
        if limit is None:
            limits.pop(category, None)
        else:
            limits[category] = limit
        return self.model_validate({**self.model_dump(), "category_limits": limits})


CURRENT_SCHEMA_VERSION = 3


class LedgerState(BaseModel):
    """
    Everything the app persists, as one serializable document.

    The ledger itself never does I/O; storage backends load and save
    instances of this model.
    """

    schema_version: int = Field(default=CURRENT_SCHEMA_VERSION, ge=1)
    expenses: list[Expense] = Field(default_factory=list)
    incomes: list[Income] = Field(default_factory=list)
    savings_goals: list[SavingsGoal] = Field(default_factory=list)
    subscriptions: list[Subscription] = Field(default_factory=list)
    budget: Budget = Field(default_factory=Budget)


# =============================================================================
# REPORTING MODELS
# =============================================================================

class DateRange(BaseModel):
    """An inclusive range of calendar days."""

    start: dt.date
    end: dt.date

    @model_validator(mode="after")
    def validate_order(self) -> "DateRange":
        if self.end < self.start:
            raise ValueError("Date range end cannot be before start")
        return self

    def __contains__(self, day: dt.date) -> bool:
        return self.start <= day <= self.end


class DailySpending(BaseModel):
    day: dt.date
    amount: Decimal


class MonthlySpending(BaseModel):
    month: dt.date = Field(..., description="First day of the month")
    amount: Decimal


class CategoryBreakdown(BaseModel):
    category: ExpenseCategory
    amount: Decimal

    @field_validator("amount")
    @classmethod
    def round_amount(cls, v: Decimal) -> Decimal:
        return quantize_amount(v)
