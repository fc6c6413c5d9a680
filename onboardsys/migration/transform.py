"""Map loosely-typed legacy records onto the remote API's input models.

Legacy records use camelCase keys, leave optional fields out and sometimes
store empty strings where the remote schema expects ``null``. Every
transformer reads the record field by field, applies the defaults below and
lets pydantic enforce the remote value domains:

========== ===================================== ==================================
Family     Renamed fields                        Defaults
========== ===================================== ==================================
tag        -                                     icon=None
task       dueDate→due_date                      completed=False, optional text→None
mission    rewardType/rewardValue→reward_*       progress=0, completed=False
gallery    imageUrl→image_url, altText→alt_text  metadata={}, permissions=defaults
employee   fullName, startDate, workArrangement… status="active", priority="medium"
person     meetingDate, meetingTime, followUp…   topics=[], notes="", follow_up=""
========== ===================================== ==================================

Falsy legacy values (``""``, ``0``, ``False``, ``None``) fall back to the
default, matching how the legacy client wrote its optional fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

Priority = Literal["high", "medium", "low"]

DEFAULT_PERMISSIONS: dict[str, bool] = {"public": False, "editable": True, "allowComments": True}


class LegacyRecordError(ValueError):
    """Raised when a legacy record cannot be read at all."""


class RemoteInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class TagInput(RemoteInput):
    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$")
    icon: str | None = None


class TaskInput(RemoteInput):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    due_date: str = Field(..., min_length=1)
    completed: bool = False
    notes: str | None = None
    link: str | None = None
    priority: Priority | None = None
    department: Literal["HR", "IT", "Manager"] | None = None


class MissionInput(RemoteInput):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    deadline: str | None = None
    link: str | None = None
    progress: int | float = Field(0, ge=0, le=100)
    completed: bool = False
    reward_type: Literal["points", "badge", "achievement"] | None = None
    reward_value: str | None = None


class RequirementInput(RemoteInput):
    tag: str = Field(..., min_length=1)
    count: int | float = Field(..., ge=1)
    current: int | float = Field(0, ge=0)


class GalleryItemInput(RemoteInput):
    type: Literal["photo", "note"]
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    content: str | None = None
    location: str | None = None
    date: str = Field(..., min_length=1)
    image_url: str | None = None
    alt_text: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    permissions: dict[str, bool] = Field(default_factory=lambda: dict(DEFAULT_PERMISSIONS))


class EmployeeInput(RemoteInput):
    full_name: str = Field(..., min_length=1, max_length=255)
    start_date: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1, max_length=255)
    department: str = Field(..., min_length=1, max_length=255)
    work_arrangement: Literal["remote", "onsite", "hybrid"]
    work_arrangement_details: dict[str, Any] = Field(default_factory=dict)
    supervisor: dict[str, Any] = Field(default_factory=dict)
    contact: dict[str, Any]
    onboarding_progress: dict[str, Any] = Field(default_factory=dict)
    status: Literal["active", "inactive", "archived"] = "active"
    priority: Priority = "medium"
    tags: list[str] = Field(default_factory=list)
    notes: str = ""


class PeopleNoteInput(RemoteInput):
    name: str = Field(..., min_length=1, max_length=255)
    role: str = Field(..., min_length=1, max_length=255)
    department: str = Field(..., min_length=1, max_length=255)
    meeting_date: str | None = None
    meeting_time: str | None = None
    topics: list[str] = Field(default_factory=list)
    notes: str = ""
    follow_up: str = ""
    photo_url: str | None = None


@dataclass(frozen=True)
class TaskDraft:
    task: TaskInput
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MissionDraft:
    mission: MissionInput
    requirements: list[RequirementInput] = field(default_factory=list)


@dataclass(frozen=True)
class GalleryDraft:
    item: GalleryItemInput
    tags: list[str] = field(default_factory=list)


def _as_mapping(record: Any) -> Mapping[str, Any]:
    if not isinstance(record, Mapping):
        raise LegacyRecordError(f"Expected an object, got {type(record).__name__}")
    return record


def _string_list(value: Any, name: str) -> list[str]:
    if not value:
        return []
    if not isinstance(value, list):
        raise LegacyRecordError(f"{name}: expected a list, got {type(value).__name__}")
    return [str(item) for item in value if item not in (None, "")]


def _text(value: Any) -> Any:
    # Numeric reward values (points) are stored as text remotely.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _mapping(value: Any, name: str, default: Mapping[str, Any] | None = None) -> dict[str, Any]:
    if not value:
        return dict(default or {})
    if not isinstance(value, Mapping):
        raise LegacyRecordError(f"{name}: expected an object, got {type(value).__name__}")
    return {**(default or {}), **value}


def transform_tag(record: Any) -> TagInput:
    data = _as_mapping(record)
    return TagInput(
        name=data.get("name"),
        color=data.get("color"),
        icon=data.get("icon") or None,
    )


def transform_task(record: Any) -> TaskDraft:
    data = _as_mapping(record)
    task = TaskInput(
        title=data.get("title"),
        description=data.get("description") or None,
        due_date=data.get("dueDate"),
        completed=data.get("completed") or False,
        notes=data.get("notes") or None,
        link=data.get("link") or None,
        priority=data.get("priority") or None,
        department=data.get("department") or None,
    )
    return TaskDraft(task=task, tags=_string_list(data.get("tags"), "tags"))


def transform_requirement(record: Any) -> RequirementInput:
    data = _as_mapping(record)
    return RequirementInput(
        tag=data.get("tag"),
        count=data.get("count"),
        current=data.get("current") or 0,
    )


def transform_mission(record: Any) -> MissionDraft:
    data = _as_mapping(record)
    raw_requirements = data.get("requirements") or []
    if not isinstance(raw_requirements, list):
        raise LegacyRecordError(f"requirements: expected a list, got {type(raw_requirements).__name__}")
    mission = MissionInput(
        title=data.get("title"),
        description=data.get("description") or None,
        deadline=data.get("deadline") or None,
        link=data.get("link") or None,
        progress=data.get("progress") or 0,
        completed=data.get("completed") or False,
        reward_type=data.get("rewardType") or None,
        reward_value=_text(data.get("rewardValue")) or None,
    )
    return MissionDraft(
        mission=mission,
        requirements=[transform_requirement(req) for req in raw_requirements],
    )


def transform_gallery_item(record: Any) -> GalleryDraft:
    data = _as_mapping(record)
    item = GalleryItemInput(
        type=data.get("type"),
        title=data.get("title"),
        description=data.get("description") or None,
        content=data.get("content") or None,
        location=data.get("location") or None,
        date=data.get("date"),
        image_url=data.get("imageUrl") or None,
        alt_text=data.get("altText") or None,
        metadata=_mapping(data.get("metadata"), "metadata"),
        permissions=_mapping(data.get("permissions"), "permissions", DEFAULT_PERMISSIONS),
    )
    return GalleryDraft(item=item, tags=_string_list(data.get("tags"), "tags"))


def transform_employee(record: Any) -> EmployeeInput:
    data = _as_mapping(record)
    return EmployeeInput(
        full_name=data.get("fullName"),
        start_date=data.get("startDate"),
        position=data.get("position"),
        department=data.get("department"),
        work_arrangement=data.get("workArrangement"),
        work_arrangement_details=_mapping(data.get("workArrangementDetails"), "workArrangementDetails"),
        supervisor=_mapping(data.get("supervisor"), "supervisor"),
        contact=data.get("contact"),
        onboarding_progress=_mapping(data.get("onboardingProgress"), "onboardingProgress"),
        status=data.get("status") or "active",
        priority=data.get("priority") or "medium",
        tags=_string_list(data.get("tags"), "tags"),
        notes=data.get("notes") or "",
    )


def transform_people_note(record: Any) -> PeopleNoteInput:
    data = _as_mapping(record)
    return PeopleNoteInput(
        name=data.get("name"),
        role=data.get("role"),
        department=data.get("department"),
        meeting_date=data.get("meetingDate") or None,
        meeting_time=data.get("meetingTime") or None,
        topics=_string_list(data.get("topics"), "topics"),
        notes=data.get("notes") or "",
        follow_up=data.get("followUp") or "",
        photo_url=data.get("photoUrl") or None,
    )


def describe_error(exc: BaseException) -> str:
    """Render a transform or transport exception as one readable line."""

    if isinstance(exc, ValidationError):
        parts = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err["loc"]) or "record"
            parts.append(f"{location}: {err['msg']}")
        return "; ".join(parts) or "Invalid record"
    return str(exc) or exc.__class__.__name__


__all__ = [
    "DEFAULT_PERMISSIONS",
    "EmployeeInput",
    "GalleryDraft",
    "GalleryItemInput",
    "LegacyRecordError",
    "MissionDraft",
    "MissionInput",
    "PeopleNoteInput",
    "RequirementInput",
    "TagInput",
    "TaskDraft",
    "TaskInput",
    "describe_error",
    "transform_employee",
    "transform_gallery_item",
    "transform_mission",
    "transform_people_note",
    "transform_requirement",
    "transform_tag",
    "transform_task",
]
