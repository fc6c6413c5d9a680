from __future__ import annotations

import json

import pytest

from onboardsys.storage import LEGACY_FAMILIES, LegacyStoreReader, MemoryStore
from onboardsys.storage.legacy import PEOPLE_NOTES, TAGS, TASKS


def test_family_order_starts_with_tags() -> None:
    assert [family.name for family in LEGACY_FAMILIES] == [
        "tags",
        "tasks",
        "missions",
        "gallery_items",
        "employees",
        "people_notes",
    ]


def test_read_collection_returns_records() -> None:
    store = MemoryStore({TASKS.storage_key: json.dumps({"state": {"tasks": [{"title": "A"}, {"title": "B"}]}})})
    reader = LegacyStoreReader(store)

    assert reader.read_collection(TASKS) == [{"title": "A"}, {"title": "B"}]
    assert reader.has_records(TASKS) is True


def test_people_notes_use_their_own_key() -> None:
    store = MemoryStore({"people-notes-storage": json.dumps({"state": {"people": [{"name": "Ana"}]}})})
    reader = LegacyStoreReader(store)

    assert reader.read_collection(PEOPLE_NOTES) == [{"name": "Ana"}]


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "{broken json",
        "[]",
        json.dumps({"state": None}),
        json.dumps({"state": {}}),
        json.dumps({"state": {"tags": "not-a-list"}}),
        json.dumps({"state": {"other": [{"name": "IT"}]}}),
    ],
)
def test_read_collection_tolerates_absent_or_malformed(raw: str | None) -> None:
    store = MemoryStore({} if raw is None else {TAGS.storage_key: raw})
    reader = LegacyStoreReader(store)

    assert reader.read_collection(TAGS) == []
    assert reader.has_records(TAGS) is False


def test_record_counts_covers_every_family() -> None:
    store = MemoryStore({TAGS.storage_key: json.dumps({"state": {"tags": [{"name": "IT"}, {"name": "HR"}]}})})

    counts = LegacyStoreReader(store).record_counts()

    assert counts == {
        "tags": 2,
        "tasks": 0,
        "missions": 0,
        "gallery_items": 0,
        "employees": 0,
        "people_notes": 0,
    }
