"""Read-only access to the legacy record sets kept in client-local storage."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from loguru import logger

from .store import KeyValueStore


@dataclass(frozen=True)
class LegacyFamily:
    """Where one entity family's legacy records are stored.

    Each record set is persisted as ``{"state": {<collection>: [...]}}``
    under ``storage_key``.
    """

    name: str
    storage_key: str
    collection: str
    label: str


TAGS = LegacyFamily("tags", "onboard-buddy-tags", "tags", "Tag")
TASKS = LegacyFamily("tasks", "onboard-buddy-tasks", "tasks", "Task")
MISSIONS = LegacyFamily("missions", "onboard-buddy-missions", "missions", "Mission")
GALLERY_ITEMS = LegacyFamily("gallery_items", "onboard-buddy-gallery", "items", "Gallery item")
EMPLOYEES = LegacyFamily("employees", "onboard-buddy-employees", "employees", "Employee")
PEOPLE_NOTES = LegacyFamily("people_notes", "people-notes-storage", "people", "Person")

# Tags come first: tasks and gallery items reference them by name.
LEGACY_FAMILIES: tuple[LegacyFamily, ...] = (
    TAGS,
    TASKS,
    MISSIONS,
    GALLERY_ITEMS,
    EMPLOYEES,
    PEOPLE_NOTES,
)


class LegacyStoreReader:
    """Parse legacy record sets, treating absent or corrupt entries as empty."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def read_collection(self, family: LegacyFamily) -> list[Any]:
        raw = self.store.read(family.storage_key)
        if not raw:
            return []
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning(
                "Ignoring malformed legacy data under {}: {}",
                family.storage_key,
                exc.msg,
            )
            return []

        state = parsed.get("state") if isinstance(parsed, dict) else None
        if not isinstance(state, dict):
            return []
        records = state.get(family.collection)
        if not isinstance(records, list):
            return []
        return records

    def has_records(self, family: LegacyFamily) -> bool:
        return len(self.read_collection(family)) > 0

    def record_counts(self) -> dict[str, int]:
        return {family.name: len(self.read_collection(family)) for family in LEGACY_FAMILIES}


__all__ = [
    "EMPLOYEES",
    "GALLERY_ITEMS",
    "LEGACY_FAMILIES",
    "LegacyFamily",
    "LegacyStoreReader",
    "MISSIONS",
    "PEOPLE_NOTES",
    "TAGS",
    "TASKS",
]
