"""HTTP client for a PostgREST/Supabase-style persistence API."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

import requests
from loguru import logger

from onboardsys.config.remote import RemoteConfig


class PostgrestError(RuntimeError):
    """Raised when the API rejects a request.

    ``code`` carries the PostgreSQL/PostgREST error code (``23505``,
    ``PGRST116``...) when the response provides one, otherwise the HTTP
    status as a string.
    """

    def __init__(self, code: str, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status


class TableClient(Protocol):
    """Row-level operations the entity services rely on."""

    def insert(self, table: str, rows: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
        ...

    def select(self, table: str, filters: Mapping[str, Any], *, limit: int | None = None) -> list[dict[str, Any]]:
        ...

    def delete(self, table: str, filters: Mapping[str, Any]) -> None:
        ...

    def current_user_id(self) -> str | None:
        ...


class RemoteClient:
    """Synchronous client; each call blocks until the API answers."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        access_token: str | None = None,
        timeout: float = 30.0,
        user_agent: str = "onboardsys/0.1",
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.rest_url = f"{self.base_url}/rest/v1"
        self.timeout = timeout
        self.access_token = access_token
        self.session = requests.Session()
        self.session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {access_token or api_key}",
                "User-Agent": user_agent,
                "Content-Type": "application/json",
            }
        )
        self._user_id: str | None = None

    @classmethod
    def from_config(cls, config: RemoteConfig) -> "RemoteClient":
        return cls(
            config.base_url,
            config.api_key_secret,
            access_token=config.access_token_secret,
            timeout=config.timeout,
            user_agent=config.user_agent,
        )

    def insert(self, table: str, rows: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
        payload = dict(rows) if isinstance(rows, Mapping) else [dict(row) for row in rows]
        response = self.session.post(
            f"{self.rest_url}/{table}",
            json=payload,
            headers={"Prefer": "return=representation"},
            timeout=self.timeout,
        )
        self._raise_for_error(response, table)
        return self._rows(response)

    def select(self, table: str, filters: Mapping[str, Any], *, limit: int | None = None) -> list[dict[str, Any]]:
        params = self._filter_params(filters)
        params["select"] = "*"
        if limit is not None:
            params["limit"] = str(limit)
        response = self.session.get(f"{self.rest_url}/{table}", params=params, timeout=self.timeout)
        self._raise_for_error(response, table)
        return self._rows(response)

    def delete(self, table: str, filters: Mapping[str, Any]) -> None:
        if not filters:
            raise ValueError("Refusing to delete without filters")
        response = self.session.delete(
            f"{self.rest_url}/{table}",
            params=self._filter_params(filters),
            timeout=self.timeout,
        )
        self._raise_for_error(response, table)

    def current_user_id(self) -> str | None:
        """Return the signed-in user's id, or ``None`` without a valid session."""

        if self._user_id is not None:
            return self._user_id
        if not self.access_token:
            return None

        response = self.session.get(f"{self.base_url}/auth/v1/user", timeout=self.timeout)
        if response.status_code in (401, 403):
            logger.warning("Access token rejected by auth endpoint ({})", response.status_code)
            return None
        self._raise_for_error(response, "auth")
        self._user_id = response.json().get("id") or None
        return self._user_id

    @staticmethod
    def _filter_params(filters: Mapping[str, Any]) -> dict[str, str]:
        params: dict[str, str] = {}
        for column, value in filters.items():
            if isinstance(value, bool):
                value = str(value).lower()
            params[column] = f"eq.{value}"
        return params

    @staticmethod
    def _rows(response: requests.Response) -> list[dict[str, Any]]:
        if not response.content:
            return []
        body = response.json()
        if isinstance(body, list):
            return body
        return [body]

    @staticmethod
    def _raise_for_error(response: requests.Response, table: str) -> None:
        if response.status_code < 400:
            return
        code = str(response.status_code)
        message = response.text or response.reason or "Request failed"
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            code = str(body.get("code") or code)
            message = str(body.get("message") or body.get("msg") or message)
        logger.debug("Request against {} failed: {} {}", table, code, message)
        raise PostgrestError(code, message, status=response.status_code)


__all__ = ["PostgrestError", "RemoteClient", "TableClient"]
