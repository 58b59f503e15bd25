"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON document on local disk is the default
backend because:
1. The whole ledger is small enough to rewrite on every change
2. Users can back it up by copying one file
3. No database setup required

TRADEOFFS:
- Every save rewrites the whole file (fine for personal use)
- No concurrent writers (the app has a single owner)

Writes go to a temporary file that then replaces the real one, so a crash
mid-write never leaves a half-written ledger behind.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from budgetpulse.config import get_settings
from budgetpulse.models.audit import AuditEvent
from budgetpulse.models.records import LedgerState
from budgetpulse.services.storage.interface import (
    AuditStorageInterface,
    CorruptDataError,
    LedgerStorageInterface,
    PersistenceUnavailableError,
)


class JsonFileLedgerStorage(LedgerStorageInterface):
    """
    Ledger persisted as one pretty-printed JSON document.

    Decimals are written as strings and dates as ISO-8601, both via
    pydantic's JSON mode.
    """

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path else get_settings().storage.ledger_path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> LedgerState:
        """Load the ledger, returning an empty state if no file exists."""
        if not self._path.exists():
            return LedgerState()

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceUnavailableError(
                f"Failed to read ledger at {self._path}: {e}"
            ) from e
        except UnicodeDecodeError as e:
            raise CorruptDataError(
                f"Ledger at {self._path} is not UTF-8 text: {e}"
            ) from e

        if not raw.strip():
            return LedgerState()

        try:
            return LedgerState.model_validate_json(raw)
        except ValidationError as e:
            raise CorruptDataError(
                f"Ledger at {self._path} could not be decoded: {e}"
            ) from e

    def save(self, state: LedgerState) -> None:
        """Write the ledger atomically."""
        payload = state.model_dump_json(indent=2)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                dir=self._path.parent,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                Path(tmp_name).replace(self._path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceUnavailableError(
                f"Failed to write ledger at {self._path}: {e}"
            ) from e


class JsonLinesAuditStorage(AuditStorageInterface):
    """
    Append-only audit log, one JSON object per line.
    """

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path else get_settings().storage.audit_path

    def append_event(self, event: AuditEvent) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(event.model_dump_json() + "\n")
        except OSError as e:
            raise PersistenceUnavailableError(
                f"Failed to append audit event: {e}"
            ) from e

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        if not self._path.exists():
            return []

        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise PersistenceUnavailableError(
                f"Failed to read audit log: {e}"
            ) from e
        except UnicodeDecodeError as e:
            raise CorruptDataError(
                f"Audit log at {self._path} is not UTF-8 text: {e}"
            ) from e

        events = []
        for line in reversed(lines):
            if len(events) >= limit:
                break
            if not line.strip():
                continue
            try:
                events.append(AuditEvent.model_validate(json.loads(line)))
            except (ValueError, ValidationError):
                continue  # Skip malformed lines
        return events
