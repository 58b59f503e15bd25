"""Domain errors raised by the ledger."""

from uuid import UUID


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class RecordNotFoundError(LedgerError):
    """No record with the given id exists."""

    def __init__(self, entity_type: str, record_id: UUID):
        self.entity_type = entity_type
        self.record_id = record_id
        super().__init__(f"{entity_type.capitalize()} not found: {record_id}")


class NotRecurringError(LedgerError):
    """A recurring-only operation was called on a one-time expense."""
    pass


class FeatureLockedError(LedgerError):
    """The requested feature needs a premium subscription."""

    def __init__(self, feature: str):
        self.feature = feature
        super().__init__(f"'{feature}' requires BudgetPulse Premium")
