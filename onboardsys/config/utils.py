"""Helpers for secrets referenced from configuration files."""

from __future__ import annotations

import os

_ENV_PREFIX = "env:"


def resolve_env_reference(value: str | None, *, required: bool = True) -> str | None:
    """Expand an ``"env:VAR_NAME"`` reference into the variable's value.

    Literal strings come back untouched and ``None`` passes through. A
    reference to an unset or empty variable raises :class:`EnvironmentError`
    unless ``required`` is ``False``, in which case ``None`` is returned so
    the caller can run without credentials (every remote call then fails
    with an authentication error instead).
    """

    if value is None or not value.startswith(_ENV_PREFIX):
        return value

    var_name = value[len(_ENV_PREFIX):]
    resolved = os.getenv(var_name)
    if resolved:
        return resolved
    if required:
        raise EnvironmentError(f"Environment variable '{var_name}' is not set or empty")
    return None


def mask_secret(value: str | None, *, visible: int = 4) -> str:
    """Return ``value`` with everything except its last characters hidden."""

    if not value:
        return "<unset>"
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


__all__ = ["mask_secret", "resolve_env_reference"]
