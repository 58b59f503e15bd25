"""
Storage Services Package

Provides abstract interfaces and concrete implementations for persistence.
Currently implements a local JSON file as the backend, but designed to be
swappable.
"""

from budgetpulse.services.storage.interface import (
    AuditStorageInterface,
    CorruptDataError,
    LedgerStorageInterface,
    PersistenceUnavailableError,
    StorageError,
)
from budgetpulse.services.storage.json_file import (
    JsonFileLedgerStorage,
    JsonLinesAuditStorage,
)
from budgetpulse.services.storage.memory import (
    DetachedLedgerStorage,
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStorageInterface",
    # Exceptions
    "CorruptDataError",
    "PersistenceUnavailableError",
    "StorageError",
    # JSON file implementation
    "JsonFileLedgerStorage",
    "JsonLinesAuditStorage",
    # In-memory implementation
    "DetachedLedgerStorage",
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
]
