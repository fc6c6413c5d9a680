from __future__ import annotations

import json
from pathlib import Path

import pytest

from onboardsys.storage import JsonFileStore, MemoryStore, StorageError


def test_memory_store_round_trip() -> None:
    store = MemoryStore({"a": "1"})
    assert store.read("a") == "1"
    assert store.read("missing") is None

    store.write("b", "2")
    store.remove("a")
    store.remove("never-there")

    assert store.snapshot() == {"b": "2"}


def test_json_file_store_missing_file_reads_empty(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "absent.json")
    assert store.read("anything") is None


def test_json_file_store_persists_writes(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "local-storage.json"
    store = JsonFileStore(path)

    store.write("data-migration-version", "1")
    store.write("onboard-buddy-tags", '{"state": {"tags": []}}')
    store.remove("onboard-buddy-tags")

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload == {"data-migration-version": "1"}
    assert JsonFileStore(path).read("data-migration-version") == "1"
    assert list(path.parent.glob(".local-storage.json.*")) == []


def test_json_file_store_keeps_non_string_values_as_json(tmp_path: Path) -> None:
    path = tmp_path / "local-storage.json"
    path.write_text(json.dumps({"onboard-buddy-tags": {"state": {"tags": [{"name": "IT"}]}}}), encoding="utf-8")

    raw = JsonFileStore(path).read("onboard-buddy-tags")

    assert raw is not None
    assert json.loads(raw) == {"state": {"tags": [{"name": "IT"}]}}


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_json_file_store_rejects_corrupt_file(tmp_path: Path, content: str) -> None:
    path = tmp_path / "local-storage.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(StorageError):
        JsonFileStore(path).read("key")
