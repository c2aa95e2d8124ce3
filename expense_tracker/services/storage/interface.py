"""
Abstract Storage Interface

DESIGN DECISION: The expense collection lives in a plain string-keyed
key-value store holding one serialized blob per key, the way a browser's
localStorage does. The store knows nothing about expenses; the gateway in
`gateway.py` owns serialization and the read-modify-write cycle.

This allows us to:
1. Use an in-memory store for tests
2. Persist to local JSON files
3. Swap in any other blob store without touching the core
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for a string-keyed blob store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key is unset

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Storage key
            value: Serialized blob

        Raises:
            StorageQuotaExceededError: If the value does not fit
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Remove a key. Removing an unset key is a no-op.

        Raises:
            StorageError: If the backend cannot be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageQuotaExceededError(StorageError):
    """The value does not fit in the store's quota."""
    pass


class StorageUnavailableError(StorageError):
    """The storage backend cannot be reached or opened."""
    pass
