"""Shared fixtures: a fixed clock, free-plan settings and an in-memory store."""

from datetime import date

import pytest

from budgetpulse.audit import AuditLogger
from budgetpulse.config import AppSettings
from budgetpulse.ledger.store import LedgerStore
from budgetpulse.services.storage import InMemoryAuditStorage, InMemoryLedgerStorage


TODAY = date(2024, 6, 15)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        language="en",
        is_premium=False,
        max_free_savings_goals=2,
        upcoming_window_days=7,
        trend_days=30,
        trend_months=6,
        budget_alert_thresholds="75,90,100",
        max_expense_amount=100000.0,
        future_date_tolerance_days=0,
    )


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage) -> AuditLogger:
    return AuditLogger(audit_storage)


@pytest.fixture
def storage() -> InMemoryLedgerStorage:
    return InMemoryLedgerStorage()


@pytest.fixture
def store(storage, audit_logger, settings) -> LedgerStore:
    return LedgerStore.open(
        storage,
        audit_logger=audit_logger,
        settings=settings,
        clock=lambda: TODAY,
    )
