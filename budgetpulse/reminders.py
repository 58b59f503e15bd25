"""
Payment reminders.

A reminder is due for every recurring expense and every active
subscription with reminders enabled whose next payment falls within the
upcoming window. Each reminder is meant to be shown from the day before
the payment.
"""

from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Iterable
from uuid import UUID

from pydantic import BaseModel

from budgetpulse.models.records import Expense, Subscription


class ReminderKind(str, Enum):
    RECURRING_EXPENSE = "recurring_expense"
    SUBSCRIPTION = "subscription"


class Reminder(BaseModel):
    kind: ReminderKind
    record_id: UUID
    title: str
    amount: Decimal
    due_date: date
    days_until: int

    @property
    def remind_on(self) -> date:
        return self.due_date - timedelta(days=1)


def due_reminders(
    expenses: Iterable[Expense],
    subscriptions: Iterable[Subscription],
    today: date,
    window_days: int = 7,
) -> list[Reminder]:
    """Payments due between today and ``window_days`` from now, soonest first."""
    reminders = []
    for expense in expenses:
        if not expense.is_recurring or expense.next_due_date is None:
            continue
        days_until = (expense.next_due_date - today).days
        if 0 <= days_until <= window_days:
            reminders.append(Reminder(
                kind=ReminderKind.RECURRING_EXPENSE,
                record_id=expense.id,
                title=expense.title,
                amount=expense.amount,
                due_date=expense.next_due_date,
                days_until=days_until,
            ))

    for subscription in subscriptions:
        if not (subscription.is_active and subscription.reminder_enabled):
            continue
        if subscription.is_due_soon(today, window_days):
            reminders.append(Reminder(
                kind=ReminderKind.SUBSCRIPTION,
                record_id=subscription.id,
                title=subscription.name,
                amount=subscription.amount,
                due_date=subscription.next_billing_date,
                days_until=subscription.days_until_billing(today),
            ))

    return sorted(reminders, key=lambda r: (r.due_date, r.title))
