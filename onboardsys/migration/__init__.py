"""Legacy-to-remote data migration."""

from __future__ import annotations

from .engine import (
    CURRENT_MIGRATION_VERSION,
    MIGRATION_VERSION_KEY,
    DataMigrationService,
    MigrationOutcome,
)
from .migrators import MIGRATION_ORDER, FamilyMigrator, FamilyResult

__all__ = [
    "CURRENT_MIGRATION_VERSION",
    "DataMigrationService",
    "FamilyMigrator",
    "FamilyResult",
    "MIGRATION_ORDER",
    "MIGRATION_VERSION_KEY",
    "MigrationOutcome",
]
