"""Services package."""

from expense_tracker.services.storage import (
    ExpenseStorage,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    StorageError,
    StorageQuotaExceededError,
    StorageUnavailableError,
)

__all__ = [
    # Storage services
    "ExpenseStorage",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "StorageError",
    "StorageQuotaExceededError",
    "StorageUnavailableError",
]
