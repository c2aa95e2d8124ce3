"""
In-Memory Key-Value Store

Used by tests and by the `memory` storage backend. An optional byte quota
mimics the browser's storage limit so write failures can be exercised.
"""

from typing import Optional

from expense_tracker.services.storage.interface import (
    KeyValueStore,
    StorageQuotaExceededError,
)


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store; contents vanish with the process."""

    def __init__(
        self,
        initial: Optional[dict[str, str]] = None,
        quota_bytes: Optional[int] = None,
    ):
        self._data: dict[str, str] = dict(initial or {})
        self._quota_bytes = quota_bytes

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            others = sum(
                len(k.encode("utf-8")) + len(v.encode("utf-8"))
                for k, v in self._data.items()
                if k != key
            )
            needed = len(key.encode("utf-8")) + len(value.encode("utf-8"))
            if others + needed > self._quota_bytes:
                raise StorageQuotaExceededError(
                    f"Storing {needed} bytes under '{key}' exceeds the "
                    f"{self._quota_bytes} byte quota"
                )
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        """Currently set keys, in insertion order."""
        return list(self._data)
