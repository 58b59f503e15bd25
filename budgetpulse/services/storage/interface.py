"""
Abstract Storage Interface

DESIGN DECISION: The ledger never does I/O itself. It hands a plain
LedgerState to a storage backend and gets one back.
This allows us to:
1. Keep the aggregation logic pure and easy to test
2. Use in-memory storage for tests
3. Swap the JSON file for a database later without touching the ledger

Failures are surfaced as a generic PersistenceUnavailableError for the UI.
Nothing here retries automatically.
"""

from abc import ABC, abstractmethod

from budgetpulse.models.audit import AuditEvent
from budgetpulse.models.records import LedgerState


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger persistence.

    Any storage implementation (JSON file, SQLite, etc.)
    must implement these methods.
    """

    @abstractmethod
    def load(self) -> LedgerState:
        """
        Load the full ledger.

        Returns:
            The stored state, or an empty default state if nothing
            has been saved yet

        Raises:
            PersistenceUnavailableError: If the backend cannot be read
            CorruptDataError: If stored data cannot be decoded
        """
        pass

    @abstractmethod
    def save(self, state: LedgerState) -> None:
        """
        Replace the stored ledger with ``state``.

        Raises:
            PersistenceUnavailableError: If the backend cannot be written
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> None:
        """
        Append an audit event to the log.

        Raises:
            PersistenceUnavailableError: If the log cannot be written
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Args:
            limit: Maximum number of events to return

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class PersistenceUnavailableError(StorageError):
    """The storage backend could not be read or written."""
    pass


class CorruptDataError(StorageError):
    """Stored data exists but could not be decoded into a ledger."""
    pass
