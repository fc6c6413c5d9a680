"""Shared response envelope and error mapping for the entity services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from loguru import logger

from .client import PostgrestError, TableClient

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Structured reason attached to a failed service call."""

    ALREADY_EXISTS = "already_exists"
    REFERENCED = "referenced"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    AUTH_REQUIRED = "auth_required"
    UNKNOWN = "unknown"


_CODE_MAP: dict[str, tuple[ErrorKind, str]] = {
    "23505": (ErrorKind.ALREADY_EXISTS, "This record already exists"),
    "23503": (ErrorKind.REFERENCED, "Cannot delete this record as it is referenced by other data"),
    "42501": (ErrorKind.PERMISSION_DENIED, "You do not have permission to perform this action"),
    "PGRST116": (ErrorKind.NOT_FOUND, "No data found"),
}


class AuthenticationRequired(RuntimeError):
    """Raised internally when no signed-in user is available."""


class EmptyResult(RuntimeError):
    """Raised when a write returns no row, e.g. hidden by row-level security."""


@dataclass(frozen=True)
class ServiceResponse(Generic[T]):
    """Either ``data`` or an ``error`` message with its ``kind``."""

    data: T | None = None
    error: str | None = None
    kind: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T) -> "ServiceResponse[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, error: str, kind: ErrorKind = ErrorKind.UNKNOWN, data: T | None = None) -> "ServiceResponse[T]":
        return cls(data=data, error=error, kind=kind)


class BaseService:
    """Base class for the per-table services.

    Services never raise for expected failures; every method converts
    exceptions into a failed :class:`ServiceResponse` through
    :meth:`handle_error`.
    """

    def __init__(self, client: TableClient) -> None:
        self.client = client

    def handle_error(self, error: BaseException | None) -> tuple[ErrorKind, str]:
        if error is None:
            return ErrorKind.UNKNOWN, "An unknown error occurred"
        if isinstance(error, AuthenticationRequired):
            return ErrorKind.AUTH_REQUIRED, "Authentication required"
        if isinstance(error, EmptyResult):
            return ErrorKind.UNKNOWN, "No data returned"
        if isinstance(error, PostgrestError):
            mapped = _CODE_MAP.get(error.code)
            if mapped is not None:
                return mapped
            if error.status in (401, 403):
                return ErrorKind.AUTH_REQUIRED, error.message or "Authentication required"
            return ErrorKind.UNKNOWN, error.message or "A database error occurred"
        return ErrorKind.UNKNOWN, str(error) or "An error occurred"

    def fail(self, error: BaseException, context: str) -> ServiceResponse:
        kind, message = self.handle_error(error)
        logger.debug("{} failed ({}): {}", context, kind.value, message)
        return ServiceResponse.failure(message, kind)

    def first_row(self, rows: list[dict]) -> dict:
        if not rows:
            raise EmptyResult("No data returned")
        return rows[0]

    def require_auth(self) -> str:
        user_id = self.client.current_user_id()
        if not user_id:
            raise AuthenticationRequired("Authentication required")
        return user_id


__all__ = ["AuthenticationRequired", "BaseService", "EmptyResult", "ErrorKind", "ServiceResponse"]
