"""Orchestrate the one-time move of legacy client data into the remote API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from loguru import logger

from onboardsys.remote import RemoteServices
from onboardsys.storage import LEGACY_FAMILIES, KeyValueStore, LegacyStoreReader, StorageError

from .migrators import MIGRATION_ORDER, FamilyMigrator

MIGRATION_VERSION_KEY = "data-migration-version"
CURRENT_MIGRATION_VERSION = 1


@dataclass
class MigrationOutcome:
    """Aggregated result of one :meth:`DataMigrationService.migrate_all` run."""

    success: bool = True
    counts: dict[str, int] = field(
        default_factory=lambda: {family.name: 0 for family in LEGACY_FAMILIES}
    )
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def total_migrated(self) -> int:
        return sum(self.counts.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "counts": dict(self.counts),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


class DataMigrationService:
    """Gate, run and record the legacy data migration for one client.

    The version marker under :data:`MIGRATION_VERSION_KEY` is the only
    idempotency guard: :meth:`migrate_all` itself does not check it, so
    calling it twice without consulting :meth:`needs_migration` creates
    duplicate rows for every family except tags.
    """

    def __init__(
        self,
        store: KeyValueStore,
        services: RemoteServices,
        *,
        version: int = CURRENT_MIGRATION_VERSION,
        migrators: Sequence[type[FamilyMigrator]] = MIGRATION_ORDER,
    ) -> None:
        self.store = store
        self.services = services
        self.version = version
        self.reader = LegacyStoreReader(store)
        self.migrators = tuple(migrators)

    def check_migration_status(self) -> bool:
        """Return ``True`` when the marker records the current version."""

        return self.store.read(MIGRATION_VERSION_KEY) == str(self.version)

    def needs_migration(self) -> bool:
        """Decide whether a migration should be offered. Never raises, never writes."""

        try:
            if self.check_migration_status():
                return False
        except StorageError as exc:
            logger.warning("Cannot read migration marker: {}", exc)
            return False

        for family in LEGACY_FAMILIES:
            try:
                if self.reader.has_records(family):
                    logger.debug("Legacy {} found under {}", family.name, family.storage_key)
                    return True
            except StorageError as exc:
                logger.warning("Cannot read legacy {}: {}", family.name, exc)
        return False

    def legacy_record_counts(self) -> dict[str, int]:
        return self.reader.record_counts()

    def migrate_all(self) -> MigrationOutcome:
        outcome = MigrationOutcome()
        logger.info("Starting legacy data migration (version {})", self.version)

        try:
            for migrator_cls in self.migrators:
                migrator = migrator_cls(self.reader, self.services)
                result = migrator.migrate()
                outcome.counts[result.family] = result.count
                outcome.errors.extend(result.errors)
                outcome.warnings.extend(result.warnings)

            outcome.success = not outcome.errors
            if outcome.success:
                self._write_marker()
        except Exception as exc:
            logger.exception("Legacy data migration aborted")
            outcome.success = False
            outcome.errors.append(f"Migration failed: {str(exc) or exc.__class__.__name__}")

        if outcome.success:
            logger.info("Legacy data migration completed: {} records", outcome.total_migrated)
        else:
            logger.error(
                "Legacy data migration finished with {} errors; marker not written",
                len(outcome.errors),
            )
        return outcome

    def skip(self) -> None:
        """Opt out of migrating; legacy data stays where it is."""

        logger.info("Skipping legacy data migration at user request")
        self._write_marker()

    def clear_legacy_data(self) -> None:
        """Remove every legacy key. Must be confirmed by the user beforehand."""

        for family in LEGACY_FAMILIES:
            self.store.remove(family.storage_key)
        logger.info("Removed {} legacy storage keys", len(LEGACY_FAMILIES))

    def _write_marker(self) -> None:
        self.store.write(MIGRATION_VERSION_KEY, str(self.version))
        logger.info("Recorded migration marker {}={}", MIGRATION_VERSION_KEY, self.version)


__all__ = [
    "CURRENT_MIGRATION_VERSION",
    "DataMigrationService",
    "MIGRATION_VERSION_KEY",
    "MigrationOutcome",
]
