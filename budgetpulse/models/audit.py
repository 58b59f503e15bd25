"""
Audit Models for BudgetPulse

Every change to the ledger is recorded as an audit event.
This provides:
1. Traceability of every add, edit and delete
2. Debugging information when persistence fails
3. A history of rollover computations per month

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Record lifecycle
    RECORD_ADDED = "record_added"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"

    # Savings
    CONTRIBUTION_ADDED = "contribution_added"
    CONTRIBUTION_REMOVED = "contribution_removed"

    # Budget
    BUDGET_UPDATED = "budget_updated"
    ROLLOVER_APPLIED = "rollover_applied"
    ROLLOVER_RESET = "rollover_reset"

    # Recurring payments
    RECURRING_PAID = "recurring_paid"
    RECURRING_SKIPPED = "recurring_skipped"
    SUBSCRIPTION_PAID = "subscription_paid"

    # Persistence
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_MIGRATED = "ledger_migrated"
    LEDGER_RESET = "ledger_reset"
    SAVE_FAILED = "save_failed"
    LOAD_FAILED = "load_failed"

    # Validation and gating
    VALIDATION_FAILED = "validation_failed"
    FEATURE_LOCKED = "feature_locked"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every mutation of the ledger creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of record (e.g., 'expense', 'subscription', 'budget')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the record this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_added("expense", expense.id, "Coffee")
        event = AuditEventBuilder.rollover_applied("2024-03", "120.00")
    """

    @staticmethod
    def record_added(entity_type: str, entity_id: UUID, title: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_ADDED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} added: {title}",
            details={"title": title},
            is_user_action=True,
        )

    @staticmethod
    def record_updated(entity_type: str, entity_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} updated",
            is_user_action=True,
        )

    @staticmethod
    def record_deleted(entity_type: str, entity_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} deleted",
            is_user_action=True,
        )

    @staticmethod
    def contribution_changed(
        goal_id: UUID,
        contribution_id: UUID,
        amount: str,
        removed: bool = False,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.CONTRIBUTION_REMOVED
                if removed
                else AuditEventType.CONTRIBUTION_ADDED
            ),
            entity_type="savings_goal",
            entity_id=goal_id,
            description=(
                f"Contribution of {amount} {'removed from' if removed else 'added to'} goal"
            ),
            details={
                "contribution_id": str(contribution_id),
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_updated(changes: dict[str, Any]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_UPDATED,
            entity_type="budget",
            description="Budget settings updated",
            details=changes,
            is_user_action=True,
        )

    @staticmethod
    def rollover_applied(period: str, amount: str, previous_spend: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROLLOVER_APPLIED,
            entity_type="budget",
            description=f"Rollover for {period}: {amount}",
            details={
                "period": period,
                "rollover_amount": amount,
                "previous_period_spend": previous_spend,
            },
        )

    @staticmethod
    def rollover_reset() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROLLOVER_RESET,
            entity_type="budget",
            description="Rollover reset to zero",
            is_user_action=True,
        )

    @staticmethod
    def recurring_advanced(
        entity_type: str,
        entity_id: UUID,
        next_date: str,
        paid: bool,
    ) -> AuditEvent:
        if entity_type == "subscription":
            event_type = AuditEventType.SUBSCRIPTION_PAID
        elif paid:
            event_type = AuditEventType.RECURRING_PAID
        else:
            event_type = AuditEventType.RECURRING_SKIPPED
        return AuditEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} {'paid' if paid else 'skipped'}, next on {next_date}",
            details={"next_date": next_date, "paid": paid},
            is_user_action=True,
        )

    @staticmethod
    def ledger_loaded(record_counts: dict[str, int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            description="Ledger loaded from storage",
            details=record_counts,
        )

    @staticmethod
    def ledger_migrated(from_version: int, to_version: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_MIGRATED,
            description=f"Ledger migrated from schema v{from_version} to v{to_version}",
            details={"from_version": from_version, "to_version": to_version},
        )

    @staticmethod
    def ledger_reset() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_RESET,
            severity=AuditSeverity.WARNING,
            description="All ledger data reset",
            is_user_action=True,
        )

    @staticmethod
    def persistence_failed(operation: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.LOAD_FAILED
                if operation == "load"
                else AuditEventType.SAVE_FAILED
            ),
            severity=AuditSeverity.ERROR,
            description=f"Ledger {operation} failed",
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def validation_failed(entity_type: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            description=f"{entity_type.capitalize()} validation failed with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def feature_locked(feature: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FEATURE_LOCKED,
            severity=AuditSeverity.INFO,
            description=f"Premium feature requested: {feature}",
            details={"feature": feature},
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
