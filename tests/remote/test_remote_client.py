"""Tests for the PostgREST-style HTTP client."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest
import requests

from onboardsys.config import RemoteConfig
from onboardsys.remote import PostgrestError, RemoteClient


def _response(status: int, body: Any = None, *, text: str | None = None) -> Mock:
    response = Mock(spec=requests.Response)
    response.status_code = status
    response.reason = "Reason"
    if body is None and text is None:
        response.content = b""
        response.text = ""
        response.json.side_effect = ValueError("no body")
    elif body is None:
        response.content = text.encode()
        response.text = text
        response.json.side_effect = ValueError("not json")
    else:
        response.content = b"{}"
        response.text = "{}"
        response.json.return_value = body
    return response


@pytest.fixture
def client() -> RemoteClient:
    remote = RemoteClient("https://example.test/", "anon-key", access_token="token-1", timeout=5.0)
    remote.session = Mock()
    return remote


def test_headers_use_access_token() -> None:
    remote = RemoteClient("https://example.test", "anon-key", access_token="token-1")
    assert remote.session.headers["apikey"] == "anon-key"
    assert remote.session.headers["Authorization"] == "Bearer token-1"
    assert remote.rest_url == "https://example.test/rest/v1"


def test_headers_fall_back_to_api_key() -> None:
    remote = RemoteClient("https://example.test", "anon-key")
    assert remote.session.headers["Authorization"] == "Bearer anon-key"


def test_from_config_resolves_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEST_ANON_KEY", "from-env")
    config = RemoteConfig(base_url="https://example.test", api_key="env:TEST_ANON_KEY", timeout=7.5)

    remote = RemoteClient.from_config(config)

    assert remote.session.headers["apikey"] == "from-env"
    assert remote.timeout == 7.5
    assert remote.access_token is None


def test_insert_posts_and_returns_rows(client: RemoteClient) -> None:
    client.session.post.return_value = _response(201, [{"id": "t-1", "name": "IT"}])

    rows = client.insert("tags", {"name": "IT"})

    assert rows == [{"id": "t-1", "name": "IT"}]
    args, kwargs = client.session.post.call_args
    assert args[0] == "https://example.test/rest/v1/tags"
    assert kwargs["json"] == {"name": "IT"}
    assert kwargs["headers"] == {"Prefer": "return=representation"}
    assert kwargs["timeout"] == 5.0


def test_select_builds_equality_filters(client: RemoteClient) -> None:
    client.session.get.return_value = _response(200, [])

    assert client.select("tasks", {"id": "x", "completed": False}, limit=1) == []

    _, kwargs = client.session.get.call_args
    assert kwargs["params"] == {"id": "eq.x", "completed": "eq.false", "select": "*", "limit": "1"}


def test_delete_requires_filters(client: RemoteClient) -> None:
    with pytest.raises(ValueError):
        client.delete("tasks", {})
    client.session.delete.assert_not_called()


def test_error_body_is_parsed(client: RemoteClient) -> None:
    client.session.post.return_value = _response(
        409, {"code": "23505", "message": "duplicate key value violates unique constraint"}
    )

    with pytest.raises(PostgrestError) as excinfo:
        client.insert("tags", {"name": "IT"})

    assert excinfo.value.code == "23505"
    assert excinfo.value.status == 409
    assert "duplicate key" in excinfo.value.message


def test_error_without_json_uses_status(client: RemoteClient) -> None:
    client.session.get.return_value = _response(502, text="Bad gateway")

    with pytest.raises(PostgrestError) as excinfo:
        client.select("tasks", {"id": "x"})

    assert excinfo.value.code == "502"
    assert excinfo.value.message == "Bad gateway"


def test_current_user_id_is_cached(client: RemoteClient) -> None:
    client.session.get.return_value = _response(200, {"id": "user-42"})

    assert client.current_user_id() == "user-42"
    assert client.current_user_id() == "user-42"
    assert client.session.get.call_count == 1


def test_current_user_id_rejected_token(client: RemoteClient) -> None:
    client.session.get.return_value = _response(401, {"msg": "invalid JWT"})
    assert client.current_user_id() is None


def test_current_user_id_without_token() -> None:
    remote = RemoteClient("https://example.test", "anon-key")
    remote.session = Mock()

    assert remote.current_user_id() is None
    remote.session.get.assert_not_called()
