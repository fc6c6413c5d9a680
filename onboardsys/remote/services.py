"""Per-table services for the remote persistence API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from loguru import logger

from .base import BaseService, ErrorKind, ServiceResponse
from .client import TableClient

Row = dict[str, Any]


class TagService(BaseService):
    """Tags are unique per owner by name."""

    table = "tags"

    def get_tag_by_name(self, name: str) -> ServiceResponse[Row]:
        try:
            user_id = self.require_auth()
            rows = self.client.select(self.table, {"user_id": user_id, "name": name}, limit=1)
        except Exception as exc:
            return self.fail(exc, f"get_tag_by_name({name!r})")
        return ServiceResponse.success(rows[0] if rows else None)

    def create_tag(self, tag: Mapping[str, Any]) -> ServiceResponse[Row]:
        """Create a tag; an existing tag of the same name is returned as ``ALREADY_EXISTS``."""

        try:
            user_id = self.require_auth()
            existing = self.client.select(self.table, {"user_id": user_id, "name": tag["name"]}, limit=1)
            if existing:
                return ServiceResponse.failure(
                    f"Tag '{tag['name']}' already exists",
                    ErrorKind.ALREADY_EXISTS,
                    data=existing[0],
                )
            created = self.first_row(self.client.insert(self.table, {**tag, "user_id": user_id}))
        except Exception as exc:
            return self.fail(exc, f"create_tag({tag.get('name')!r})")
        return ServiceResponse.success(created)

    def delete_tag(self, tag_id: str) -> ServiceResponse[bool]:
        try:
            user_id = self.require_auth()
            self.client.delete(self.table, {"id": tag_id, "user_id": user_id})
        except Exception as exc:
            return self.fail(exc, f"delete_tag({tag_id})")
        return ServiceResponse.success(True)


class TaskService(BaseService):
    table = "tasks"
    tags_table = "task_tags"

    def create_task(self, task: Mapping[str, Any]) -> ServiceResponse[Row]:
        try:
            user_id = self.require_auth()
            created = self.first_row(self.client.insert(self.table, {**task, "user_id": user_id}))
        except Exception as exc:
            return self.fail(exc, f"create_task({task.get('title')!r})")
        return ServiceResponse.success(created)

    def get_task_by_id(self, task_id: str) -> ServiceResponse[Row]:
        try:
            user_id = self.require_auth()
            rows = self.client.select(self.table, {"id": task_id, "user_id": user_id}, limit=1)
        except Exception as exc:
            return self.fail(exc, f"get_task_by_id({task_id})")
        return ServiceResponse.success(rows[0] if rows else None)

    def add_task_tags(self, task_id: str, tags: Sequence[str]) -> ServiceResponse[bool]:
        task = self.get_task_by_id(task_id)
        if not task.ok:
            return ServiceResponse.failure(task.error or "Task lookup failed", task.kind or ErrorKind.UNKNOWN)
        if task.data is None:
            return ServiceResponse.failure("Task not found", ErrorKind.NOT_FOUND)
        if not tags:
            return ServiceResponse.success(True)
        try:
            self.client.insert(self.tags_table, [{"task_id": task_id, "tag": tag} for tag in tags])
        except Exception as exc:
            return self.fail(exc, f"add_task_tags({task_id})")
        return ServiceResponse.success(True)

    def delete_task(self, task_id: str) -> ServiceResponse[bool]:
        try:
            user_id = self.require_auth()
            self.client.delete(self.table, {"id": task_id, "user_id": user_id})
        except Exception as exc:
            return self.fail(exc, f"delete_task({task_id})")
        return ServiceResponse.success(True)


class MissionService(BaseService):
    table = "missions"
    requirements_table = "mission_requirements"

    def create_mission(
        self,
        mission: Mapping[str, Any],
        requirements: Sequence[Mapping[str, Any]],
    ) -> ServiceResponse[Row]:
        """Insert the mission and its requirements as one unit.

        When the requirements cannot be inserted the mission row is deleted
        again, so callers never see a mission without its requirements.
        """

        try:
            user_id = self.require_auth()
            created = self.first_row(self.client.insert(self.table, {**mission, "user_id": user_id}))
        except Exception as exc:
            return self.fail(exc, f"create_mission({mission.get('title')!r})")

        requirement_rows: list[Row] = []
        if requirements:
            try:
                requirement_rows = self.client.insert(
                    self.requirements_table,
                    [{**req, "mission_id": created["id"]} for req in requirements],
                )
            except Exception as exc:
                self._discard(created["id"])
                return self.fail(exc, f"create_mission({mission.get('title')!r}) requirements")

        return ServiceResponse.success({**created, "requirements": requirement_rows})

    def delete_mission(self, mission_id: str) -> ServiceResponse[bool]:
        try:
            user_id = self.require_auth()
            self.client.delete(self.table, {"id": mission_id, "user_id": user_id})
        except Exception as exc:
            return self.fail(exc, f"delete_mission({mission_id})")
        return ServiceResponse.success(True)

    def _discard(self, mission_id: str) -> None:
        logger.warning("Rolling back mission {} after requirement insert failure", mission_id)
        result = self.delete_mission(mission_id)
        if not result.ok:
            logger.error("Rollback of mission {} failed: {}", mission_id, result.error)


class GalleryService(BaseService):
    table = "gallery_items"
    tags_table = "gallery_tags"

    def create_item(self, item: Mapping[str, Any], tags: Sequence[str]) -> ServiceResponse[Row]:
        """Insert a gallery item and its tag associations.

        A failed tag insert deletes the freshly created item and reports the
        tag failure as the item's error.
        """

        try:
            user_id = self.require_auth()
            created = self.first_row(self.client.insert(self.table, {**item, "user_id": user_id}))
        except Exception as exc:
            return self.fail(exc, f"create_item({item.get('title')!r})")

        if tags:
            try:
                self.client.insert(self.tags_table, [{"item_id": created["id"], "tag": tag} for tag in tags])
            except Exception as exc:
                self._discard(created["id"])
                return self.fail(exc, f"create_item({item.get('title')!r}) tags")

        return ServiceResponse.success({**created, "tags": list(tags)})

    def get_item_by_id(self, item_id: str) -> ServiceResponse[Row]:
        try:
            user_id = self.require_auth()
            rows = self.client.select(self.table, {"id": item_id, "user_id": user_id}, limit=1)
        except Exception as exc:
            return self.fail(exc, f"get_item_by_id({item_id})")
        if not rows:
            return ServiceResponse.failure("Gallery item not found", ErrorKind.NOT_FOUND)
        return ServiceResponse.success(rows[0])

    def delete_item(self, item_id: str) -> ServiceResponse[bool]:
        try:
            user_id = self.require_auth()
            self.client.delete(self.table, {"id": item_id, "user_id": user_id})
        except Exception as exc:
            return self.fail(exc, f"delete_item({item_id})")
        return ServiceResponse.success(True)

    def _discard(self, item_id: str) -> None:
        logger.warning("Rolling back gallery item {} after tag insert failure", item_id)
        result = self.delete_item(item_id)
        if not result.ok:
            logger.error("Rollback of gallery item {} failed: {}", item_id, result.error)


class EmployeeService(BaseService):
    table = "employees"
    audit_table = "employee_audit_logs"

    def create_employee(self, employee: Mapping[str, Any]) -> ServiceResponse[Row]:
        try:
            user_id = self.require_auth()
            created = self.first_row(
                self.client.insert(
                    self.table,
                    {
                        **employee,
                        "user_id": user_id,
                        "created_by": user_id,
                        "last_modified_by": user_id,
                    },
                )
            )
        except Exception as exc:
            return self.fail(exc, f"create_employee({employee.get('full_name')!r})")

        self._audit(created["id"], "created", user_id)
        return ServiceResponse.success(created)

    def _audit(self, employee_id: str, action: str, user_id: str) -> None:
        # Audit entries never fail the write they describe.
        try:
            self.client.insert(
                self.audit_table,
                {
                    "employee_id": employee_id,
                    "action": action,
                    "changes": [],
                    "performed_by": user_id,
                },
            )
        except Exception as exc:
            logger.warning("Failed to record audit log for employee {}: {}", employee_id, exc)


class PeopleNoteService(BaseService):
    table = "people_notes"

    def create_people_note(self, note: Mapping[str, Any]) -> ServiceResponse[Row]:
        try:
            user_id = self.require_auth()
            created = self.first_row(self.client.insert(self.table, {**note, "user_id": user_id}))
        except Exception as exc:
            return self.fail(exc, f"create_people_note({note.get('name')!r})")
        return ServiceResponse.success(created)


@dataclass(frozen=True)
class RemoteServices:
    """The six entity services sharing one client."""

    tags: TagService
    tasks: TaskService
    missions: MissionService
    gallery: GalleryService
    employees: EmployeeService
    people_notes: PeopleNoteService

    @classmethod
    def from_client(cls, client: TableClient) -> "RemoteServices":
        return cls(
            tags=TagService(client),
            tasks=TaskService(client),
            missions=MissionService(client),
            gallery=GalleryService(client),
            employees=EmployeeService(client),
            people_notes=PeopleNoteService(client),
        )


__all__ = [
    "EmployeeService",
    "GalleryService",
    "MissionService",
    "PeopleNoteService",
    "RemoteServices",
    "TagService",
    "TaskService",
]
