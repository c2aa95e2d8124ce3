"""
JSON File Key-Value Store

Each key maps to one file under a base directory. Values are written to a
temporary file first and moved into place, so a crash mid-write leaves the
previous value intact.
"""

import errno
import re
from pathlib import Path
from typing import Optional

from expense_tracker.services.storage.interface import (
    KeyValueStore,
    StorageError,
    StorageQuotaExceededError,
    StorageUnavailableError,
)


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


class JsonFileKeyValueStore(KeyValueStore):
    """File-per-key store rooted at `base_path`."""

    def __init__(self, base_path: Path, suffix: str = ".json"):
        self._base_path = Path(base_path)
        self._suffix = suffix
        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(
                f"Unable to create storage directory {self._base_path}"
            ) from exc

    @property
    def base_path(self) -> Path:
        return self._base_path

    def path_for(self, key: str) -> Path:
        """File backing a key. Keys are restricted to safe filename characters."""
        if not _KEY_PATTERN.fullmatch(key) or key in {".", ".."}:
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._base_path / f"{key}{self._suffix}"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Unable to read from {path}") from exc

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
            temp_path.replace(path)
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            if exc.errno == errno.ENOSPC:
                raise StorageQuotaExceededError(f"No space left to write {path}") from exc
            raise StorageError(f"Unable to write to {path}") from exc

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Unable to delete {path}") from exc
