"""Remote persistence API configuration."""

from __future__ import annotations

from pydantic import Field, field_validator

from onboardsys.config.base import BaseConfig
from onboardsys.config.utils import resolve_env_reference


class RemoteConfig(BaseConfig):
    """Connection settings for the PostgREST-style persistence API."""

    base_url: str = Field(..., description="Project URL, e.g. https://xyz.supabase.co")
    api_key: str = Field(..., description="Anonymous API key, can use 'env:VAR_NAME' format")
    access_token: str | None = Field(
        None,
        description="Signed-in user's access token, can use 'env:VAR_NAME' format",
    )
    timeout: float = Field(30.0, gt=0, description="Per-request timeout in seconds")
    user_agent: str = Field("onboardsys/0.1", description="User-Agent header sent with every request")

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return value.rstrip("/")

    @property
    def api_key_secret(self) -> str:
        """Return the resolved API key, expanding any ``env:VAR`` references."""

        resolved = resolve_env_reference(self.api_key)
        assert resolved is not None  # guarded by resolve_env_reference
        return resolved

    @property
    def access_token_secret(self) -> str | None:
        """Resolved access token, or ``None`` when no session is configured."""

        return resolve_env_reference(self.access_token, required=False)


__all__ = ["RemoteConfig"]
