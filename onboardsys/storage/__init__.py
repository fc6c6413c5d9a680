"""Client-local storage backends and legacy record access."""

from __future__ import annotations

from .legacy import LEGACY_FAMILIES, LegacyFamily, LegacyStoreReader
from .store import JsonFileStore, KeyValueStore, MemoryStore, StorageError

__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "LEGACY_FAMILIES",
    "LegacyFamily",
    "LegacyStoreReader",
    "MemoryStore",
    "StorageError",
]
