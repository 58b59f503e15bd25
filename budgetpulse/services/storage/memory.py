"""
In-memory storage backends.

Used by the tests and when the app runs without a writable data
directory. ``fail_on_save`` simulates an unavailable backend.
``DetachedLedgerStorage`` takes the place of a ledger file that could
not be read.
"""

from typing import Optional

from budgetpulse.models.audit import AuditEvent
from budgetpulse.models.records import LedgerState
from budgetpulse.services.storage.interface import (
    AuditStorageInterface,
    LedgerStorageInterface,
    PersistenceUnavailableError,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Keeps a deep copy of the last saved state."""

    def __init__(self, initial: Optional[LedgerState] = None):
        self._state = initial.model_copy(deep=True) if initial else None
        self.save_count = 0
        self.fail_on_save = False

    def load(self) -> LedgerState:
        if self._state is None:
            return LedgerState()
        return self._state.model_copy(deep=True)

    def save(self, state: LedgerState) -> None:
        if self.fail_on_save:
            raise PersistenceUnavailableError("In-memory storage is unavailable")
        self._state = state.model_copy(deep=True)
        self.save_count += 1

    @property
    def saved_state(self) -> Optional[LedgerState]:
        return self._state


class DetachedLedgerStorage(LedgerStorageInterface):
    """
    Refuses every save so an unreadable ledger file is never overwritten.

    The app keeps working in memory and each change is reported as not
    saved until the file is repaired.
    """

    def __init__(self, reason: str):
        self.reason = reason

    def load(self) -> LedgerState:
        return LedgerState()

    def save(self, state: LedgerState) -> None:
        raise PersistenceUnavailableError(f"Ledger is not being saved: {self.reason}")


class InMemoryAuditStorage(AuditStorageInterface):

    def __init__(self):
        self.events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> None:
        self.events.append(event)

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self.events))[:limit]
