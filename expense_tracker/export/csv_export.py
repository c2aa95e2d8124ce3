"""
CSV export.

The layout is fixed:

    Date,Amount,Category,Description
    2024-01-15,50,Food,"Lunch"

Only the description is quoted; it is the one free-text column. Embedded
double quotes are doubled. Rows are joined with a bare newline and there is
no trailing newline, so an empty collection yields just the header line.
"""

from collections.abc import Iterable
from decimal import Decimal

from expense_tracker.models.expense import Expense


CSV_HEADER = ("Date", "Amount", "Category", "Description")


def format_amount(amount: float) -> str:
    """Plain decimal text: no exponent, no grouping, no trailing '.0'."""
    if float(amount).is_integer():
        return str(int(amount))
    return format(Decimal(repr(float(amount))), "f")


def quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def to_csv(expenses: Iterable[Expense]) -> str:
    """Serialize expenses to CSV text, one row per record in input order."""
    lines = [",".join(CSV_HEADER)]
    for expense in expenses:
        lines.append(",".join([
            expense.date,
            format_amount(expense.amount),
            expense.category.value,
            quote(expense.description),
        ]))
    return "\n".join(lines)
