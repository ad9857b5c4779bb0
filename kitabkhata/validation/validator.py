"""
Two-Stage Validation

STAGE 1 - SCHEMA VALIDATION (pydantic, TransactionInput):
- Type checking, required fields, date format
- Negative, NaN and infinite amounts are rejected, never coerced
- Cheque number required for cheques, dropped otherwise

STAGE 2 - SEMANTIC VALIDATION (this module):
- Blank customer or item
- Payment larger than the price (allowed, but flagged)
- Sale dates too far in the future
- Absurd amounts

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the shopkeeper can decide.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Optional

from pydantic import ValidationError

from kitabkhata.config import AppSettings, get_settings
from kitabkhata.models.transaction import (
    TransactionInput,
    ValidationIssue,
    ValidationResult,
)


class TransactionValidator:
    """Checks a sale before it is written to the ledger."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def parse(self, data: dict[str, Any]) -> TransactionInput:
        """
        Stage 1: build a TransactionInput from raw form or JSON data.

        Raises:
            pydantic.ValidationError: With one entry per bad field
        """
        return TransactionInput.model_validate(data)

    def validate(
        self,
        data: TransactionInput,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """Stage 2: business checks on an already well-formed input."""
        today = today or date.today()
        issues = []

        if not data.customer_name:
            issues.append(ValidationIssue(
                field="customer_name",
                issue_type="missing",
                message="Customer name is required",
                severity="error",
            ))

        if not data.book_title:
            issues.append(ValidationIssue(
                field="book_title",
                issue_type="missing",
                message="Item name is required",
                severity="error",
            ))

        if data.amount_paid > data.total_price:
            issues.append(ValidationIssue(
                field="amount_paid",
                issue_type="overpaid",
                message=(
                    f"Amount paid (₹{data.amount_paid}) is more than the price "
                    f"(₹{data.total_price}); the balance will be negative"
                ),
                severity="warning",
            ))

        ceiling = Decimal(str(self._settings.max_transaction_amount))
        if data.total_price > ceiling:
            issues.append(ValidationIssue(
                field="total_price",
                issue_type="suspicious_value",
                message=f"Price ₹{data.total_price} is unusually large - please double-check",
                severity="warning",
            ))

        latest = today + timedelta(days=self._settings.future_date_tolerance_days)
        if data.sale_date > latest:
            issues.append(ValidationIssue(
                field="sale_date",
                issue_type="future_date",
                message=f"Sale date {data.sale_date.isoformat()} is in the future",
                severity="warning",
            ))

        has_errors = any(issue.severity == "error" for issue in issues)
        return ValidationResult(is_valid=not has_errors, issues=issues)

    def check(
        self,
        data: dict[str, Any],
        today: Optional[date] = None,
    ) -> tuple[Optional[TransactionInput], ValidationResult]:
        """
        Run both stages on raw data.

        Schema errors are reported as issues instead of raised, so a form
        can show all problems at once.
        """
        try:
            parsed = self.parse(data)
        except ValidationError as e:
            issues = [
                ValidationIssue(
                    field=".".join(str(part) for part in err["loc"]) or "input",
                    issue_type=err["type"],
                    message=err["msg"],
                    severity="error",
                )
                for err in e.errors()
            ]
            return None, ValidationResult(is_valid=False, issues=issues)

        return parsed, self.validate(parsed, today=today)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """One line per issue, errors first."""
        if not result.issues:
            return "Everything looks good."

        ordered = sorted(result.issues, key=lambda i: i.severity != "error")
        lines = []
        for issue in ordered:
            prefix = "❌" if issue.severity == "error" else "⚠️"
            lines.append(f"{prefix} {issue.message}")
        return "\n".join(lines)


class InvalidTransactionError(ValueError):
    """A sale failed semantic validation and was not saved."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(i.message for i in result.issues if i.severity == "error")
        super().__init__(messages or "Transaction is not valid")
