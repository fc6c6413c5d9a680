"""Shared fixtures: path setup, in-memory storage and remote backend."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable

import pytest

_TESTS_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _TESTS_DIR.parent
for _path in (_REPO_ROOT, _TESTS_DIR):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

from fakes import InMemoryBackend  # noqa: E402

from onboardsys.migration import DataMigrationService  # noqa: E402
from onboardsys.remote import RemoteServices  # noqa: E402
from onboardsys.storage import MemoryStore  # noqa: E402


def legacy_blob(collection: str, records: list[Any]) -> str:
    """Serialise records the way the legacy client persisted them."""

    return json.dumps({"state": {collection: records}, "version": 0})


@pytest.fixture()
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture()
def services(backend: InMemoryBackend) -> RemoteServices:
    return RemoteServices.from_client(backend)


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def put_legacy(store: MemoryStore) -> Callable[[str, str, list[Any]], None]:
    def _put(key: str, collection: str, records: list[Any]) -> None:
        store.write(key, legacy_blob(collection, records))

    return _put


@pytest.fixture()
def migration_service(store: MemoryStore, services: RemoteServices) -> DataMigrationService:
    return DataMigrationService(store, services)
