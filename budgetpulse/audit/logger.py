"""
Audit Logger

DESIGN DECISION: Every change to the ledger is logged.
This provides:
1. Traceability of every add, edit and delete
2. Debugging capability when persistence fails
3. A visible history of rollover computations

The audit logger:
- Is synchronous like the rest of the ledger
- Gracefully handles failures (doesn't crash the app if logging fails)
"""

import logging
from typing import Any, Optional
from uuid import UUID

import structlog

from budgetpulse.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from budgetpulse.services.storage import AuditStorageInterface, StorageError


_CONFIGURED = False


def configure_logging(debug: bool = False) -> None:
    """Configure structlog for local JSON logging (idempotent)."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if debug else logging.INFO,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The audit storage (for persistence and user visibility)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("budgetpulse.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                self._storage.append_event(event)
                return True
            except StorageError as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Most recent persisted events, newest first."""
        if not self._storage:
            return []
        try:
            return self._storage.get_recent_events(limit=limit)
        except StorageError as e:
            self._logger.error("audit_read_failed", error=str(e))
            return []

    def log_record_added(self, entity_type: str, entity_id: UUID, title: str) -> None:
        self.log(AuditEventBuilder.record_added(entity_type, entity_id, title))

    def log_record_updated(self, entity_type: str, entity_id: UUID) -> None:
        self.log(AuditEventBuilder.record_updated(entity_type, entity_id))

    def log_record_deleted(self, entity_type: str, entity_id: UUID) -> None:
        self.log(AuditEventBuilder.record_deleted(entity_type, entity_id))

    def log_contribution(
        self,
        goal_id: UUID,
        contribution_id: UUID,
        amount: str,
        removed: bool = False,
    ) -> None:
        self.log(AuditEventBuilder.contribution_changed(
            goal_id=goal_id,
            contribution_id=contribution_id,
            amount=amount,
            removed=removed,
        ))

    def log_budget_updated(self, changes: dict[str, Any]) -> None:
        self.log(AuditEventBuilder.budget_updated(changes))

    def log_rollover_applied(self, period: str, amount: str, previous_spend: str) -> None:
        self.log(AuditEventBuilder.rollover_applied(period, amount, previous_spend))

    def log_rollover_reset(self) -> None:
        self.log(AuditEventBuilder.rollover_reset())

    def log_recurring_advanced(
        self,
        entity_type: str,
        entity_id: UUID,
        next_date: str,
        paid: bool,
    ) -> None:
        self.log(AuditEventBuilder.recurring_advanced(entity_type, entity_id, next_date, paid))

    def log_persistence_failed(self, operation: str, error_message: str) -> None:
        """Log a failed load or save."""
        self.log(AuditEventBuilder.persistence_failed(operation, error_message))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
