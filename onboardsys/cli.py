"""Command line interface for the onboardsys migration toolkit."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path

import typer
from loguru import logger
from pydantic import ValidationError

from .config import AppConfig, load_config, mask_secret
from .migration import DataMigrationService, MigrationOutcome
from .remote import RemoteClient, RemoteServices
from .storage import JsonFileStore, StorageError

FAMILY_TITLES: dict[str, str] = {
    "tags": "Tags",
    "tasks": "Tasks",
    "missions": "Missions",
    "gallery_items": "Gallery items",
    "employees": "Employees",
    "people_notes": "People notes",
}


@dataclass(slots=True)
class CLIState:
    """Holds shared state between Typer commands."""

    config_path: Path
    _config: AppConfig | None = None
    _service: DataMigrationService | None = None

    def ensure_config(self) -> AppConfig:
        if self._config is None:
            self._config = load_config(AppConfig, self.config_path)
            _configure_logging(self._config.logging_level)
            logger.info("Loaded configuration from {}", self.config_path)
        return self._config

    def storage_path(self) -> Path:
        path = self.ensure_config().storage.path
        if path.is_absolute():
            return path
        return (self.config_path.parent / path).resolve()

    def ensure_service(self) -> DataMigrationService:
        if self._service is None:
            config = self.ensure_config()
            store = JsonFileStore(self.storage_path())
            services = RemoteServices.from_client(RemoteClient.from_config(config.remote))
            self._service = DataMigrationService(store, services)
        return self._service


app = typer.Typer(help="Move legacy client-local data into the remote workspace")


def _default_config_path() -> Path:
    repo_root = Path(__file__).resolve().parents[1]
    return repo_root / "config" / "example.toml"


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):  # pragma: no cover
        raise RuntimeError("CLI context is not initialised")
    return state


def _exit(code: int) -> None:
    raise typer.Exit(code)


def render_summary(outcome: MigrationOutcome) -> str:
    """Human-readable report: counts on success, the literal errors otherwise."""

    lines: list[str] = []
    if outcome.success:
        lines.append(f"Migration complete: {outcome.total_migrated} records moved")
        for family, title in FAMILY_TITLES.items():
            lines.append(f"  {title}: {outcome.counts.get(family, 0)}")
    else:
        lines.append(f"Migration finished with {len(outcome.errors)} error(s):")
        lines.extend(f"  - {error}" for error in outcome.errors)
        lines.append("Fix the reported records and run the migration again.")
    if outcome.warnings:
        lines.append("Warnings:")
        lines.extend(f"  - {warning}" for warning in outcome.warnings)
    return "\n".join(lines)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Path = typer.Option(
        _default_config_path(),
        help="Path to the TOML configuration file",
    ),
) -> None:
    """Initialise CLI state."""

    ctx.obj = CLIState(config_path=config.resolve())


@app.command(help="Report whether a migration is pending")
def status(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    config = state.ensure_config()
    service = state.ensure_service()

    report = {
        "needs_migration": service.needs_migration(),
        "migrated": service.check_migration_status(),
        "legacy_records": service.legacy_record_counts(),
        "storage": str(state.storage_path()),
        "remote": config.remote.base_url,
        "api_key": mask_secret(config.remote.api_key_secret),
    }
    typer.echo(json.dumps(report, indent=2, ensure_ascii=False))


@app.command(help="Migrate legacy data into the remote workspace")
def run(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        help="Run even when no migration is pending (creates duplicates for non-tag records)",
    ),
) -> None:
    state = _get_state(ctx)
    service = state.ensure_service()

    if not force and not service.needs_migration():
        logger.info("No legacy data pending migration")
        typer.echo(json.dumps({"success": True, "skipped": True}, indent=2))
        return

    outcome = service.migrate_all()
    typer.echo(render_summary(outcome), err=True)
    typer.echo(json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False))
    if not outcome.success:
        _exit(1)


@app.command(help="Never offer the migration again; legacy data is kept")
def skip(ctx: typer.Context) -> None:
    service = _get_state(ctx).ensure_service()
    service.skip()
    typer.echo("Migration skipped; legacy data left in place.")


@app.command(help="Delete the legacy data from client-local storage")
def clear(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    state = _get_state(ctx)
    service = state.ensure_service()
    if not yes:
        typer.confirm(
            f"Remove all legacy data from {state.storage_path()}? This cannot be undone.",
            abort=True,
        )
    service.clear_legacy_data()
    typer.echo("Legacy data removed.")


def main(argv: list[str] | None = None) -> int:
    """Entry point compatible with setuptools console scripts."""

    try:
        result = app(args=argv, standalone_mode=False)
    except typer.Exit as exc:  # pragma: no cover - Typer translates exit codes
        return exc.exit_code
    except (OSError, ValidationError) as exc:
        logger.error("Invalid configuration: {}", exc)
        return 2
    except StorageError as exc:
        logger.error("Local storage unavailable: {}", exc)
        return 1
    except typer.Abort:
        logger.warning("Aborted")
        return 1
    if isinstance(result, int):
        return result
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
