"""
Two-Stage Validation Pipeline

DESIGN DECISION: Records entered by hand are validated in two stages
before they reach the ledger:

STAGE 1 - SCHEMA VALIDATION:
- Type checking
- Required field presence
- Non-negative amounts
- This catches malformed form input

STAGE 2 - SEMANTIC VALIDATION:
- Future date detection
- Absurd amount detection
- Likely duplicate detection
- This catches entries that are possible but probably mistaken

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for the user to confirm or correct.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from budgetpulse.audit import AuditLogger
from budgetpulse.config import AppSettings, get_settings
from budgetpulse.models.audit import AuditEventBuilder
from budgetpulse.models.records import Expense, Income
from budgetpulse.models.validation import ValidationIssue, ValidationResult


R = TypeVar("R", Expense, Income)

ENTITY_TYPES: dict[type, str] = {Expense: "expense", Income: "income"}


class RecordValidator:
    """
    Validates expense and income input through a two-stage pipeline.

    Stage 1: Schema validation (pydantic)
    Stage 2: Semantic validation (plausibility, duplicates)
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings().app
        self._audit = audit_logger

    def _validate_schema(
        self,
        model: Type[R],
        data: dict[str, Any],
    ) -> tuple[Optional[R], list[ValidationIssue]]:
        """
        Stage 1: Build the record, turning pydantic errors into issues.
        """
        try:
            return model.model_validate(data), []
        except ValidationError as e:
            issues = []
            for error in e.errors():
                field = ".".join(str(part) for part in error["loc"]) or "record"
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="missing" if error["type"] == "missing" else "invalid_value",
                    message=error["msg"],
                    severity="error",
                ))
            return None, issues

    def _validate_semantic(
        self,
        record: Union[Expense, Income],
        existing: list[Expense],
        today: date,
    ) -> list[ValidationIssue]:
        """
        Stage 2: Semantic validation.

        Checks:
        - Future dates
        - Absurd amounts
        - Zero amounts
        - Likely duplicates of an existing expense
        """
        issues = []

        max_future_date = today + timedelta(days=self._settings.future_date_tolerance_days)
        if record.date > max_future_date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date ({record.date}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        max_amount = Decimal(str(self._settings.max_expense_amount))
        if record.amount > max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({record.amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        if record.amount == 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message="Amount is zero",
                severity="warning",
            ))

        if isinstance(record, Expense):
            if record.is_recurring and record.next_due_date is None:
                issues.append(ValidationIssue(
                    field="next_due_date",
                    issue_type="missing",
                    message="Recurring expense has no next due date",
                    severity="info",
                    suggested_fix="It will not appear in upcoming payments until one is set",
                ))
            issues.extend(self._check_duplicates(record, existing))

        return issues

    @staticmethod
    def _check_duplicates(
        record: Expense,
        existing: list[Expense],
    ) -> list[ValidationIssue]:
        title = record.title.casefold()
        for other in existing:
            if (
                other.id != record.id
                and other.date == record.date
                and other.amount == record.amount
                and other.title.casefold() == title
            ):
                return [ValidationIssue(
                    field="duplicate",
                    issue_type="possible_duplicate",
                    message=(
                        f"An expense '{other.title}' for {other.amount} on "
                        f"{other.date} already exists"
                    ),
                    severity="warning",
                    suggested_fix="Please verify this isn't a duplicate entry",
                )]
        return []

    def validate(
        self,
        model: Type[R],
        data: Union[dict[str, Any], BaseModel],
        existing: Optional[list[Expense]] = None,
        today: Optional[date] = None,
    ) -> tuple[Optional[R], ValidationResult]:
        """
        Run full two-stage validation pipeline.

        Args:
            model: Expense or Income
            data: Raw form values (or an already built record)
            existing: Expenses already in the ledger, for duplicate checks
            today: Reference day for the future-date check

        Returns:
            (record or None, ValidationResult with all issues found)
        """
        if isinstance(data, BaseModel):
            data = data.model_dump()
        today = today or date.today()

        record, issues = self._validate_schema(model, data)
        schema_valid = record is not None

        semantic_valid = False
        if record is not None:
            semantic_issues = self._validate_semantic(record, existing or [], today)
            issues.extend(semantic_issues)
            semantic_valid = not any(i.severity == "error" for i in semantic_issues)

        result = ValidationResult(
            record_id=record.id if record is not None else None,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            issues=issues,
        )

        if self._audit and result.has_errors:
            self._audit.log(AuditEventBuilder.validation_failed(
                ENTITY_TYPES[model],
                [issue.model_dump() for issue in issues],
            ))

        return record, result

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "✅ All checks passed."

        lines = []

        if result.has_errors:
            lines.append("❌ Some information is missing or invalid:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.field}: {issue.message}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning.message}")
                if warning.suggested_fix:
                    lines.append(f"     💡 {warning.suggested_fix}")

        return "\n".join(lines)
