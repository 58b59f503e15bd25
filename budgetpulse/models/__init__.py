"""
Data Models Package

This package contains all Pydantic models used in BudgetPulse.
Every record the ledger stores or reports must conform to these schemas.
"""

from budgetpulse.models.records import (
    CURRENT_SCHEMA_VERSION,
    Budget,
    CategoryBreakdown,
    CurrencyCode,
    DailySpending,
    DateRange,
    Expense,
    ExpenseCategory,
    Income,
    IncomeCategory,
    LedgerState,
    MonthlySpending,
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
from budgetpulse.models.validation import (
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Ledger records
    "CURRENT_SCHEMA_VERSION",
    "Budget",
    "CategoryBreakdown",
    "CurrencyCode",
    "DailySpending",
    "DateRange",
    "Expense",
    "ExpenseCategory",
    "Income",
    "IncomeCategory",
    "LedgerState",
    "MonthlySpending",
    "RecurrenceType",
    "SavingsContribution",
    "SavingsGoal",
    "Subscription",
    "quantize_amount",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
