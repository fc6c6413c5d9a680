"""Application-level configuration models."""

from __future__ import annotations

from pydantic import Field

from onboardsys.config.base import BaseConfig
from onboardsys.config.remote import RemoteConfig
from onboardsys.config.storage import StorageConfig


class AppConfig(BaseConfig):
    """Top-level runtime configuration for the migration toolkit."""

    logging_level: str = Field("INFO", description="Log level: DEBUG, INFO, WARNING, ERROR")
    remote: RemoteConfig = Field(..., description="Remote persistence API settings")
    storage: StorageConfig = Field(default_factory=StorageConfig, description="Client-local storage settings")


__all__ = ["AppConfig"]
