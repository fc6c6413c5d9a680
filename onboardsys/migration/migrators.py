"""Per-family migrators: legacy collection in, remote rows out."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping

from loguru import logger

from onboardsys.remote import ErrorKind, RemoteServices, ServiceResponse
from onboardsys.storage.legacy import (
    EMPLOYEES,
    GALLERY_ITEMS,
    MISSIONS,
    PEOPLE_NOTES,
    TAGS,
    TASKS,
    LegacyFamily,
    LegacyStoreReader,
)

from .transform import (
    describe_error,
    transform_employee,
    transform_gallery_item,
    transform_mission,
    transform_people_note,
    transform_tag,
    transform_task,
)


@dataclass
class FamilyResult:
    """Outcome of migrating one family."""

    family: str
    count: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class FamilyMigrator(ABC):
    """Migrate every legacy record of one family, one remote call at a time.

    A record that fails to transform or is rejected by the API becomes one
    entry in :attr:`FamilyResult.errors`; the loop always moves on to the
    next record.
    """

    family: LegacyFamily
    title_field: str = "title"

    def __init__(self, reader: LegacyStoreReader, services: RemoteServices) -> None:
        self.reader = reader
        self.services = services

    def migrate(self) -> FamilyResult:
        result = FamilyResult(family=self.family.name)
        records = self.reader.read_collection(self.family)
        if not records:
            logger.debug("No legacy {} to migrate", self.family.name)
            return result

        logger.info("Migrating {} legacy {}", len(records), self.family.name)
        for position, record in enumerate(records, start=1):
            label = self.describe(record, position)
            try:
                response = self.migrate_record(record, result)
            except Exception as exc:
                self._record_error(result, label, describe_error(exc))
                continue

            if response.ok:
                result.count += 1
            elif self.is_benign(response):
                result.skipped += 1
                logger.debug("{} {} skipped: {}", self.family.label, label, response.error)
            else:
                self._record_error(result, label, response.error or "Unknown error")

        logger.info(
            "Migrated {}/{} {} ({} skipped, {} errors)",
            result.count,
            len(records),
            self.family.name,
            result.skipped,
            len(result.errors),
        )
        return result

    @abstractmethod
    def migrate_record(self, record: Any, result: FamilyResult) -> ServiceResponse:
        """Transform ``record`` and submit it; may raise on bad input."""

    def is_benign(self, response: ServiceResponse) -> bool:
        return False

    def describe(self, record: Any, position: int) -> str:
        if isinstance(record, Mapping):
            title = record.get(self.title_field)
            if title:
                return f'"{title}"'
        return f"#{position}"

    def _record_error(self, result: FamilyResult, label: str, reason: str) -> None:
        message = f"{self.family.label} {label}: {reason}"
        logger.warning(message)
        result.errors.append(message)


class TagMigrator(FamilyMigrator):
    family = TAGS
    title_field = "name"

    def migrate_record(self, record: Any, result: FamilyResult) -> ServiceResponse:
        return self.services.tags.create_tag(transform_tag(record).payload())

    def is_benign(self, response: ServiceResponse) -> bool:
        # Tag names are unique per owner, so a repeat submission is expected.
        return response.kind is ErrorKind.ALREADY_EXISTS


class TaskMigrator(FamilyMigrator):
    family = TASKS

    def migrate_record(self, record: Any, result: FamilyResult) -> ServiceResponse:
        draft = transform_task(record)
        created = self.services.tasks.create_task(draft.task.payload())
        if not created.ok or not draft.tags or created.data is None:
            return created

        # The task counts as migrated even when its tags cannot be attached.
        attached = self.services.tasks.add_task_tags(created.data["id"], draft.tags)
        if not attached.ok:
            warning = f'Task "{draft.task.title}": created without tags ({attached.error})'
            logger.warning(warning)
            result.warnings.append(warning)
        return created


class MissionMigrator(FamilyMigrator):
    family = MISSIONS

    def migrate_record(self, record: Any, result: FamilyResult) -> ServiceResponse:
        draft = transform_mission(record)
        return self.services.missions.create_mission(
            draft.mission.payload(),
            [requirement.payload() for requirement in draft.requirements],
        )


class GalleryMigrator(FamilyMigrator):
    family = GALLERY_ITEMS

    def migrate_record(self, record: Any, result: FamilyResult) -> ServiceResponse:
        draft = transform_gallery_item(record)
        return self.services.gallery.create_item(draft.item.payload(), draft.tags)


class EmployeeMigrator(FamilyMigrator):
    family = EMPLOYEES
    title_field = "fullName"

    def migrate_record(self, record: Any, result: FamilyResult) -> ServiceResponse:
        return self.services.employees.create_employee(transform_employee(record).payload())


class PeopleNoteMigrator(FamilyMigrator):
    family = PEOPLE_NOTES
    title_field = "name"

    def migrate_record(self, record: Any, result: FamilyResult) -> ServiceResponse:
        return self.services.people_notes.create_people_note(transform_people_note(record).payload())


# Tags first: tasks and gallery items attach tags by name.
MIGRATION_ORDER: tuple[type[FamilyMigrator], ...] = (
    TagMigrator,
    TaskMigrator,
    MissionMigrator,
    GalleryMigrator,
    EmployeeMigrator,
    PeopleNoteMigrator,
)


__all__ = [
    "EmployeeMigrator",
    "FamilyMigrator",
    "FamilyResult",
    "GalleryMigrator",
    "MIGRATION_ORDER",
    "MissionMigrator",
    "PeopleNoteMigrator",
    "TagMigrator",
    "TaskMigrator",
]
