"""Validation package."""

from expense_tracker.validation.validator import (
    ExpenseValidator,
    build_expense,
    is_iso_date,
    parse_amount,
)

__all__ = ["ExpenseValidator", "build_expense", "is_iso_date", "parse_amount"]
