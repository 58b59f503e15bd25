"""
CSV export of expenses.

Columns: Date, Title, Category, Amount, Notes. Newest first.
"""

import csv
import io
from typing import Iterable, Optional

from budgetpulse.i18n import category_label
from budgetpulse.models.records import Expense


CSV_HEADER = ["Date", "Title", "Category", "Amount", "Notes"]


def expenses_to_csv(expenses: Iterable[Expense], language: Optional[str] = None) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for expense in sorted(expenses, key=lambda e: e.date, reverse=True):
        writer.writerow([
            expense.date.isoformat(),
            expense.title,
            category_label(expense.category, language),
            f"{expense.amount:.2f}",
            (expense.notes or "").replace("\n", " "),
        ])
    return buffer.getvalue()
