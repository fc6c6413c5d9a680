"""Client-local key-value storage backends."""

from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger


class StorageError(RuntimeError):
    """Raised when the backing key-value file cannot be read or written."""


class KeyValueStore(ABC):
    """String-valued key-value storage, modelled on a browser's local storage."""

    @abstractmethod
    def read(self, key: str) -> str | None:
        """Return the value stored under ``key`` or ``None`` when absent."""

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``; removing an absent key is a no-op."""


class MemoryStore(KeyValueStore):
    """Dict-backed store used for previews and tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        return dict(self._data)


class JsonFileStore(KeyValueStore):
    """Store persisted as a single JSON object mapping keys to strings.

    The file is re-read on every access so that edits made by other tools
    between calls are picked up. Writes go through a temporary file in the
    same directory followed by :func:`os.replace`.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def read(self, key: str) -> str | None:
        return self._load().get(key)

    def write(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)
        logger.debug("Wrote key {} to {}", key, self.path)

    def remove(self, key: str) -> None:
        data = self._load()
        if key not in data:
            return
        del data[key]
        self._dump(data)
        logger.debug("Removed key {} from {}", key, self.path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Failed to read key-value store {self.path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise StorageError(f"Key-value store {self.path} must contain a JSON object")
        # Non-string values are kept as their JSON text, as local storage would.
        return {
            str(key): value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
            for key, value in payload.items()
        }

    def _dump(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
                fh.write("\n")
            os.replace(tmp_name, self.path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Failed to write key-value store {self.path}: {exc}") from exc


__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore", "StorageError"]
