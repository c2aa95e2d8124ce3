"""
JSON export.

Produces a self-describing envelope:

    {
      "exportDate": "2024-01-31T09:30:00.000Z",
      "totalRecords": 2,
      "expenses": [...]
    }

Each expense carries id, date, amount, category, description, createdAt and
updatedAt (only when set). Vendor is not part of the export format.
"""

import json
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, Optional

from expense_tracker.models.expense import Expense, isoformat_utc


def _json_amount(amount: float) -> Any:
    """Integral amounts serialize as 50, not 50.0."""
    return int(amount) if float(amount).is_integer() else amount


def expense_to_export_dict(expense: Expense) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": expense.id,
        "date": expense.date,
        "amount": _json_amount(expense.amount),
        "category": expense.category.value,
        "description": expense.description,
        "createdAt": expense.created_at,
    }
    if expense.updated_at is not None:
        record["updatedAt"] = expense.updated_at
    return record


def to_json(
    expenses: Iterable[Expense],
    *,
    exported_at: Optional[datetime] = None,
    indent: int = 2,
) -> str:
    """
    Serialize expenses to a pretty-printed JSON envelope.

    Args:
        expenses: Records to export, kept in input order
        exported_at: Export timestamp; defaults to the current UTC time
        indent: Indentation width

    Returns:
        JSON text
    """
    records = [expense_to_export_dict(expense) for expense in expenses]
    exported_at = exported_at or datetime.now(timezone.utc)
    envelope = {
        "exportDate": isoformat_utc(exported_at),
        "totalRecords": len(records),
        "expenses": records,
    }
    return json.dumps(envelope, indent=indent, ensure_ascii=False)
