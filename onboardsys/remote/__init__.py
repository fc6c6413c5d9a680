"""Client and entity services for the remote persistence API."""

from __future__ import annotations

from .base import AuthenticationRequired, BaseService, EmptyResult, ErrorKind, ServiceResponse
from .client import PostgrestError, RemoteClient, TableClient
from .services import (
    EmployeeService,
    GalleryService,
    MissionService,
    PeopleNoteService,
    RemoteServices,
    TagService,
    TaskService,
)

__all__ = [
    "AuthenticationRequired",
    "BaseService",
    "EmployeeService",
    "EmptyResult",
    "ErrorKind",
    "GalleryService",
    "MissionService",
    "PeopleNoteService",
    "PostgrestError",
    "RemoteClient",
    "RemoteServices",
    "ServiceResponse",
    "TableClient",
    "TagService",
    "TaskService",
]
