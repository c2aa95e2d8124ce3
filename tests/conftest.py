"""Shared fixtures for the expense tracker tests."""

from datetime import datetime, timezone

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import Expense, ExpenseCategory
from expense_tracker.services.storage import ExpenseStorage, InMemoryKeyValueStore


FIXED_NOW = datetime(2024, 1, 31, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_expense():
    """Factory for expenses with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides) -> Expense:
        counter["n"] += 1
        values = {
            "id": f"exp-{counter['n']}",
            "amount": 10.0,
            "category": ExpenseCategory.OTHER,
            "description": "Something",
            "date": "2024-01-01",
            "created_at": f"2024-01-01T00:00:{counter['n']:02d}.000Z",
        }
        values.update(overrides)
        return Expense(**values)

    return _make


@pytest.fixture
def sample_expenses(make_expense) -> list[Expense]:
    """Two Food records and one Transportation record, 180 in total."""
    return [
        make_expense(
            id="1",
            amount=50,
            category=ExpenseCategory.FOOD,
            description="Lunch",
            vendor="Cafe Roma",
            date="2024-01-15",
            created_at="2024-01-15T12:00:00.000Z",
        ),
        make_expense(
            id="2",
            amount=100,
            category=ExpenseCategory.FOOD,
            description="Groceries",
            vendor="Market",
            date="2024-01-20",
            created_at="2024-01-20T18:00:00.000Z",
        ),
        make_expense(
            id="3",
            amount=30,
            category=ExpenseCategory.TRANSPORTATION,
            description="Bus pass",
            date="2024-01-10",
            created_at="2024-01-10T08:00:00.000Z",
        ),
    ]


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger(history_size=50)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def storage(memory_store, audit_logger, clock) -> ExpenseStorage:
    return ExpenseStorage(memory_store, audit_logger=audit_logger, clock=clock)
