"""Tests for premium gating and budget alerts."""

import pytest
from datetime import date
from decimal import Decimal

from budgetpulse.alerts import AlertState, next_alert
from budgetpulse.features import Feature, FeatureAccess
from budgetpulse.ledger import FeatureLockedError
from budgetpulse.models.audit import AuditEventType


class TestFeatureAccess:

    def test_free_plan_locks_premium_features(self, settings):
        access = FeatureAccess(settings=settings)
        for feature in Feature:
            assert not access.can_access(feature)

    def test_premium_unlocks_everything(self, settings):
        access = FeatureAccess(is_premium=True, settings=settings)
        assert all(access.can_access(feature) for feature in Feature)
        assert access.can_add_savings_goal(50)

    def test_free_savings_goal_limit(self, settings):
        access = FeatureAccess(settings=settings)
        assert access.can_add_savings_goal(1)
        assert not access.can_add_savings_goal(2)

    def test_require_raises_and_audits(self, settings, audit_logger, audit_storage):
        access = FeatureAccess(settings=settings, audit_logger=audit_logger)
        with pytest.raises(FeatureLockedError, match="requires BudgetPulse Premium"):
            access.require(Feature.EXPORT)
        assert audit_storage.events[-1].event_type == AuditEventType.FEATURE_LOCKED

    def test_require_savings_goal_slot(self, settings):
        access = FeatureAccess(settings=settings)
        access.require_savings_goal_slot(0)
        with pytest.raises(FeatureLockedError):
            access.require_savings_goal_slot(2)


class TestBudgetAlerts:
    """Each threshold is reported once per month."""

    today = date(2024, 6, 15)

    def test_below_first_threshold(self):
        alert, state = next_alert(0.5, Decimal("500"), AlertState(), self.today)
        assert alert is None
        assert state.period == "2024-06"

    def test_threshold_reported_once(self):
        alert, state = next_alert(0.8, Decimal("200"), AlertState(), self.today)
        assert alert.threshold == 75
        assert alert.percent_used == 80
        assert not alert.is_exceeded

        again, state = next_alert(0.85, Decimal("150"), state, self.today)
        assert again is None
        assert state.last_threshold == 75

    def test_jump_reports_lowest_new_threshold_first(self):
        state = AlertState(period="2024-06", last_threshold=75)
        alert, state = next_alert(1.0, Decimal("0"), state, self.today)
        assert alert.threshold == 90

        alert, state = next_alert(1.0, Decimal("0"), state, self.today)
        assert alert.threshold == 100
        assert alert.is_exceeded

        alert, _ = next_alert(1.0, Decimal("0"), state, self.today)
        assert alert is None

    def test_new_month_resets(self):
        state = AlertState(period="2024-05", last_threshold=100)
        alert, state = next_alert(0.8, Decimal("200"), state, self.today)
        assert alert.threshold == 75
        assert state.period == "2024-06"

    def test_custom_thresholds(self):
        alert, _ = next_alert(0.55, Decimal("450"), AlertState(), self.today, thresholds=[90, 50])
        assert alert.threshold == 50
