"""
Expense Form Validation

DESIGN DECISION: Validation REPORTS, it never fixes.
Every rule that fails produces a ValidationIssue naming the form field and
a message suitable for display next to that field. The caller decides what
to do; the orchestrator refuses to save while any error-level issue exists.

Rules:
- amount: required; must parse as a finite number greater than zero
- description: required after trimming; at least N characters (default 3)
- date: required; must be a real calendar date in YYYY-MM-DD form

Only after validation passes is the form turned into an Expense by
build_expense(), which trims text fields and stamps timestamps.
"""

import math
import re
from datetime import date, datetime, timezone
from typing import Optional

from expense_tracker.config import get_settings
from expense_tracker.formatting import generate_id
from expense_tracker.models.expense import (
    Expense,
    ExpenseFormData,
    ValidationIssue,
    ValidationResult,
    isoformat_utc,
)


_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_amount(raw: str) -> Optional[float]:
    """Parse typed amount text; None if it is not a finite number."""
    if "_" in raw:
        return None
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def is_iso_date(value: str) -> bool:
    """True for a real calendar date written as YYYY-MM-DD."""
    if not _DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


class ExpenseValidator:
    """Validates expense form data before it becomes a record."""

    def __init__(self, min_description_length: Optional[int] = None):
        """
        Initialize validator.

        Args:
            min_description_length: Minimum trimmed description length.
                                    Defaults to the configured value.
        """
        if min_description_length is None:
            min_description_length = get_settings().app.min_description_length
        self._min_description_length = min_description_length

    def _validate_amount(self, form: ExpenseFormData) -> list[ValidationIssue]:
        if not form.amount.strip():
            return [ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
            )]
        value = parse_amount(form.amount)
        if value is None or value <= 0:
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be a positive number",
            )]
        return []

    def _validate_description(self, form: ExpenseFormData) -> list[ValidationIssue]:
        description = form.description.strip()
        if not description:
            return [ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
            )]
        if len(description) < self._min_description_length:
            return [ValidationIssue(
                field="description",
                issue_type="too_short",
                message=(
                    f"Description must be at least "
                    f"{self._min_description_length} characters"
                ),
            )]
        return []

    def _validate_date(self, form: ExpenseFormData) -> list[ValidationIssue]:
        if not form.date:
            return [ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
            )]
        if not is_iso_date(form.date):
            return [ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message="Date must be in YYYY-MM-DD format",
            )]
        return []

    def validate(self, form: ExpenseFormData) -> ValidationResult:
        """
        Run every field rule and collect the issues.

        Returns:
            ValidationResult; is_valid is False if any error was found
        """
        issues = (
            self._validate_amount(form)
            + self._validate_description(form)
            + self._validate_date(form)
        )
        return ValidationResult(
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
        )


def build_expense(
    form: ExpenseFormData,
    *,
    existing: Optional[Expense] = None,
    now: Optional[datetime] = None,
) -> Expense:
    """
    Turn validated form data into an Expense.

    A new record gets a fresh id and createdAt. When `existing` is given the
    id and createdAt are kept and updatedAt is stamped.

    IMPORTANT: Call ExpenseValidator.validate() first. This function does
    not re-check the rules.
    """
    timestamp = isoformat_utc(now or datetime.now(timezone.utc))
    vendor = (form.vendor or "").strip() or None

    return Expense(
        id=existing.id if existing else generate_id(),
        amount=float(form.amount.strip()),
        category=form.category,
        description=form.description.strip(),
        vendor=vendor,
        date=form.date,
        created_at=existing.created_at if existing else timestamp,
        updated_at=timestamp if existing else None,
    )
