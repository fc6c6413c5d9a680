"""Base configuration model and TOML loader."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ConfigDict

ConfigT = TypeVar("ConfigT", bound="BaseConfig")


class BaseConfig(BaseModel):
    """Shared settings for every configuration model."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


def load_config(config_cls: type[ConfigT], path: Path) -> ConfigT:
    """Load ``path`` as TOML and validate it against ``config_cls``.

    Raises :class:`FileNotFoundError` when the file does not exist and
    :class:`pydantic.ValidationError` when the content does not match.
    """

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    with path.open("rb") as fh:
        payload = tomllib.load(fh)
    return config_cls.model_validate(payload)


__all__ = ["BaseConfig", "load_config"]
