"""
Domain exceptions.

Storage failures have their own hierarchy in services.storage.interface and
are recovered inside the gateway. The exceptions here reach the caller.
"""

from expense_tracker.models.expense import ValidationResult


class ExpenseTrackerError(Exception):
    """Base exception for expense tracker errors."""
    pass


class ExpenseValidationError(ExpenseTrackerError):
    """Form data was rejected; `result` holds the per-field issues."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(
            f"{field}: {message}" for field, message in result.field_errors.items()
        )
        super().__init__(f"Invalid expense data: {messages}")


class UnsupportedExportFormatError(ExpenseTrackerError):
    """Requested export format is not one of csv, json or pdf."""
    pass


class ExportError(ExpenseTrackerError):
    """An export backend failed to produce output."""
    pass
