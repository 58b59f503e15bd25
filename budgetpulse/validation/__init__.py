"""Validation package."""

from budgetpulse.validation.validator import RecordValidator

__all__ = ["RecordValidator"]
