"""
Budget alerts.

An alert fires the first time spending crosses each threshold (75, 90
and 100 percent of the effective limit by default). Only the lowest
newly crossed threshold is reported per call, so a jump past several
thresholds is reported one threshold at a time. The memory of what was
already reported resets at the start of each month.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from budgetpulse.ledger.aggregation import period_key


DEFAULT_THRESHOLDS = (75, 90, 100)


class BudgetAlert(BaseModel):
    threshold: int = Field(..., ge=1)
    percent_used: int = Field(..., ge=0)
    remaining: Decimal

    @property
    def is_exceeded(self) -> bool:
        return self.threshold >= 100


class AlertState(BaseModel):
    """What has already been reported for a given month."""

    period: Optional[str] = None
    last_threshold: int = 0


def next_alert(
    progress: float,
    remaining: Decimal,
    state: AlertState,
    today: date,
    thresholds: Sequence[int] = DEFAULT_THRESHOLDS,
) -> tuple[Optional[BudgetAlert], AlertState]:
    """
    Decide whether to raise a budget alert.

    Returns the alert (or None) and the alert state to remember.
    """
    current_period = period_key(today)
    if state.period != current_period:
        state = AlertState(period=current_period, last_threshold=0)

    percent_used = int(progress * 100)
    crossed = [t for t in sorted(thresholds) if percent_used >= t > state.last_threshold]
    if not crossed:
        return None, state

    threshold = crossed[0]
    alert = BudgetAlert(threshold=threshold, percent_used=percent_used, remaining=remaining)
    return alert, AlertState(period=current_period, last_threshold=threshold)
