"""
Expense Persistence Gateway

The whole expense collection is stored as one JSON array under a single
key. Every mutation is a full cycle:

    read entire collection -> modify in memory -> write entire collection

GUARANTEES:
- Reads never raise: a missing, unreadable or malformed blob is logged and
  treated as an empty collection
- Writes never raise: failures (e.g. quota exceeded) are logged and
  reported through the boolean return value
- Each mutation runs under one lock, so concurrent writers in the same
  process cannot interleave their read-modify-write cycles

KNOWN GAP: a failed write does not roll back what the caller holds in
memory; the next successful read is the source of truth.
"""

import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional

from pydantic import ValidationError

from expense_tracker.audit import AuditLogger, get_audit_logger
from expense_tracker.config import DEFAULT_STORAGE_KEY
from expense_tracker.models.expense import Expense, isoformat_utc
from expense_tracker.services.storage.interface import KeyValueStore, StorageError


Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Alias -> attribute name, so partial updates may use either spelling.
_FIELD_NAMES: dict[str, str] = {}
for _name, _info in Expense.model_fields.items():
    _FIELD_NAMES[_name] = _name
    if _info.alias:
        _FIELD_NAMES[_info.alias] = _name


class ExpenseStorage:
    """
    Gateway between the core and the key-value store.

    Only `get_all` and `save_all` touch the store; every other operation is
    a read-modify-write built on those two.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = DEFAULT_STORAGE_KEY,
        audit_logger: Optional[AuditLogger] = None,
        clock: Clock = _utcnow,
    ):
        self._store = store
        self._key = key
        self._audit = audit_logger or get_audit_logger()
        self._clock = clock
        self._lock = threading.RLock()

    @property
    def key(self) -> str:
        return self._key

    # Public API -----------------------------------------------------------

    def get_all(self) -> list[Expense]:
        """Return every stored expense in insertion order."""
        try:
            raw = self._store.get(self._key)
        except StorageError as e:
            self._audit.log_storage_read_failed(self._key, str(e))
            return []

        if raw is None or raw == "":
            return []

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            self._audit.log_storage_read_failed(self._key, f"Invalid JSON: {e}")
            return []

        if not isinstance(payload, list):
            self._audit.log_storage_read_failed(
                self._key, f"Expected a JSON array, got {type(payload).__name__}"
            )
            return []

        try:
            return [Expense.model_validate(item) for item in payload]
        except ValidationError as e:
            self._audit.log_storage_read_failed(self._key, f"Invalid expense record: {e}")
            return []

    def save_all(self, expenses: Iterable[Expense]) -> bool:
        """
        Replace the stored collection.

        Returns:
            True if the write succeeded, False if it failed (already logged)
        """
        records = list(expenses)
        blob = json.dumps([expense.to_storage_dict() for expense in records])
        try:
            self._store.set(self._key, blob)
        except StorageError as e:
            self._audit.log_storage_write_failed(self._key, str(e), len(records))
            return False
        return True

    def add(self, expense: Expense) -> bool:
        """Append an expense to the collection."""
        with self._lock:
            expenses = self.get_all()
            expenses.append(expense)
            saved = self.save_all(expenses)
        if saved:
            self._audit.log_expense_added(expense.id, expense.amount, expense.category.value)
        return saved

    def update(self, expense_id: str, changes: dict[str, Any]) -> Optional[Expense]:
        """
        Merge partial fields into an existing expense and stamp updatedAt.

        The id and createdAt are never changed. Unknown ids are a no-op:
        nothing is written and None is returned. None is also returned when
        the write fails (already logged).
        """
        with self._lock:
            expenses = self.get_all()
            index = next(
                (i for i, expense in enumerate(expenses) if expense.id == expense_id),
                None,
            )
            if index is None:
                return None

            existing = expenses[index]
            normalized = self._normalize_changes(changes)
            merged = {
                **existing.model_dump(),
                **normalized,
                "id": existing.id,
                "created_at": existing.created_at,
                "updated_at": isoformat_utc(self._clock()),
            }
            updated = Expense.model_validate(merged)
            expenses[index] = updated
            saved = self.save_all(expenses)

        if not saved:
            return None
        self._audit.log_expense_updated(expense_id, sorted(normalized))
        return updated

    def delete(self, expense_id: str) -> bool:
        """
        Remove an expense by id.

        An unknown id still rewrites the (unchanged) collection.
        """
        with self._lock:
            expenses = self.get_all()
            remaining = [expense for expense in expenses if expense.id != expense_id]
            saved = self.save_all(remaining)
        if saved:
            self._audit.log_expense_deleted(expense_id, found=len(remaining) != len(expenses))
        return saved

    def clear(self) -> bool:
        """Remove the stored collection entirely."""
        with self._lock:
            try:
                self._store.delete(self._key)
            except StorageError as e:
                self._audit.log_storage_write_failed(self._key, str(e), 0)
                return False
        self._audit.log_expenses_cleared(self._key)
        return True

    # Internal helpers -----------------------------------------------------

    @staticmethod
    def _normalize_changes(changes: dict[str, Any]) -> dict[str, Any]:
        """Map camelCase or snake_case keys to attribute names, dropping unknowns."""
        normalized: dict[str, Any] = {}
        for key, value in changes.items():
            name = _FIELD_NAMES.get(key)
            if name is None or name in {"id", "created_at", "updated_at"}:
                continue
            normalized[name] = value
        return normalized
