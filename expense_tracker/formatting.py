"""Display helpers shared by the export renderers and any UI layer."""

from uuid import uuid4

from expense_tracker.models.expense import parse_datetime


def format_currency(amount: float) -> str:
    """US-dollar display form, e.g. 1234.5 -> '$1,234.50'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_date(value: str) -> str:
    """
    Short display form of a stored date, e.g. '2024-01-15' -> 'Jan 15, 2024'.

    Values that cannot be parsed are returned unchanged.
    """
    try:
        dt = parse_datetime(value)
    except ValueError:
        return value
    return f"{dt:%b} {dt.day}, {dt.year}"


def generate_id() -> str:
    """New opaque expense id."""
    return str(uuid4())
