"""Configuration namespace for onboardsys."""

from __future__ import annotations

from .app import AppConfig
from .base import BaseConfig, load_config
from .remote import RemoteConfig
from .storage import StorageConfig
from .utils import mask_secret, resolve_env_reference

__all__ = [
    "BaseConfig",
    "AppConfig",
    "load_config",
    "RemoteConfig",
    "StorageConfig",
    "mask_secret",
    "resolve_env_reference",
]
