"""Client-local storage configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field

from onboardsys.config.base import BaseConfig


class StorageConfig(BaseConfig):
    """Where the exported client key-value store lives on disk."""

    path: Path = Field(
        Path("data/local-storage.json"),
        description="JSON file holding the client's key-value entries (legacy data and version marker)",
    )


__all__ = ["StorageConfig"]
