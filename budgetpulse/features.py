"""
Premium feature gating.

Free users get the core ledger and a limited number of savings goals.
Reports, receipts, category budgets, export, the subscription tracker
and budget rollover need Premium.
"""

from enum import Enum
from typing import Optional

from budgetpulse.audit import AuditLogger
from budgetpulse.config import AppSettings, get_settings
from budgetpulse.ledger.errors import FeatureLockedError
from budgetpulse.models.audit import AuditEventBuilder


class Feature(str, Enum):
    REPORTS = "reports"
    RECEIPTS = "receipts"
    CATEGORY_BUDGETS = "category_budgets"
    EXPORT = "export"
    SUBSCRIPTION_TRACKER = "subscription_tracker"
    BUDGET_ROLLOVER = "budget_rollover"
    UNLIMITED_SAVINGS_GOALS = "unlimited_savings_goals"


class FeatureAccess:
    """Answers "may the user do this?" for the current plan."""

    def __init__(
        self,
        is_premium: Optional[bool] = None,
        settings: Optional[AppSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings().app
        self.is_premium = self._settings.is_premium if is_premium is None else is_premium
        self._audit = audit_logger

    def can_access(self, feature: Feature) -> bool:
        return self.is_premium

    def can_add_savings_goal(self, current_count: int) -> bool:
        return self.is_premium or current_count < self._settings.max_free_savings_goals

    def require(self, feature: Feature) -> None:
        """
        Raises:
            FeatureLockedError: If the feature needs Premium
        """
        if not self.can_access(feature):
            self._locked(feature)

    def require_savings_goal_slot(self, current_count: int) -> None:
        if not self.can_add_savings_goal(current_count):
            self._locked(Feature.UNLIMITED_SAVINGS_GOALS)

    def _locked(self, feature: Feature) -> None:
        if self._audit:
            self._audit.log(AuditEventBuilder.feature_locked(feature.value))
        raise FeatureLockedError(feature.value)
