"""
BudgetPulse - Source Package

A personal finance ledger: expenses, income, savings goals,
subscriptions and a monthly budget with optional rollover.

DESIGN PRINCIPLES:
1. Money is Decimal, never float
2. Every change is saved at once, and a failed save is reported, not retried
3. Aggregations are pure functions over the records
4. Every change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "BudgetPulse Team"
