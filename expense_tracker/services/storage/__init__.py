"""
Storage Services Package

Provides the key-value store interface, its in-memory and JSON-file
implementations, and the expense persistence gateway built on top of them.
"""

from expense_tracker.services.storage.interface import (
    KeyValueStore,
    StorageError,
    StorageQuotaExceededError,
    StorageUnavailableError,
)
from expense_tracker.services.storage.memory import InMemoryKeyValueStore
from expense_tracker.services.storage.file_store import JsonFileKeyValueStore
from expense_tracker.services.storage.gateway import ExpenseStorage

__all__ = [
    # Interfaces
    "KeyValueStore",
    # Exceptions
    "StorageError",
    "StorageQuotaExceededError",
    "StorageUnavailableError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Gateway
    "ExpenseStorage",
]
