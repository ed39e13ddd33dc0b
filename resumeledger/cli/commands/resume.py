"""Main-ledger commands: publish, versions, archive, unarchive, set-live."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from resumeledger.cli.commands._common import (
    DB_OPTION,
    OWNER_OPTION,
    console,
    service_session,
    versions_table,
)
from resumeledger.core.errors import BadRequestError


def _load_content(path: Path) -> dict:
    try:
        content = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise BadRequestError(f"Cannot read resume content from {path}: {exc}") from exc
    if not isinstance(content, dict):
        raise BadRequestError("Resume content must be a JSON object")
    return content


def publish_cmd(
    content_file: Path = typer.Argument(..., help="JSON file with the resume content."),
    owner: str = OWNER_OPTION,
    db: Path = DB_OPTION,
) -> None:
    """Publish new content as the owner's live resume."""
    with service_session(db) as service:
        content = _load_content(content_file)
        caller = service.owner_by_username(owner)
        summary = service.create_version(caller.owner_id, content)
    console.print(
        f"[bold green]Version {summary.version_number} is live[/bold green] "
        f"([dim]{summary.version_id}[/dim])"
    )


def versions_cmd(
    owner: str = OWNER_OPTION,
    include_archived: bool = typer.Option(
        False, "--all", "-a", help="Include archived versions."
    ),
    db: Path = DB_OPTION,
) -> None:
    """List the owner's main-ledger versions, newest first."""
    with service_session(db) as service:
        caller = service.owner_by_username(owner)
        versions = service.list_versions(caller.owner_id, include_archived=include_archived)
    if not versions:
        console.print("[dim]No versions yet.[/dim]")
        return
    console.print(versions_table(f"Versions of {owner}", versions))


def archive_cmd(
    version_id: str = typer.Argument(..., help="Version ID to archive."),
    owner: str = OWNER_OPTION,
    db: Path = DB_OPTION,
) -> None:
    """Hide a non-live version from listings."""
    with service_session(db) as service:
        caller = service.owner_by_username(owner)
        summary = service.archive_version(caller.owner_id, version_id)
    console.print(f"Version {summary.version_number} archived.")


def unarchive_cmd(
    version_id: str = typer.Argument(..., help="Version ID to show again."),
    owner: str = OWNER_OPTION,
    db: Path = DB_OPTION,
) -> None:
    """Show an archived version in listings again."""
    with service_session(db) as service:
        caller = service.owner_by_username(owner)
        summary = service.unarchive_version(caller.owner_id, version_id)
    console.print(f"Version {summary.version_number} unarchived.")


def set_live_cmd(
    version_id: str = typer.Argument(..., help="Version ID to restore."),
    owner: str = OWNER_OPTION,
    db: Path = DB_OPTION,
) -> None:
    """Restore a past version by copying it into a new live version."""
    with service_session(db) as service:
        caller = service.owner_by_username(owner)
        live = service.set_live(caller.owner_id, version_id)
    console.print(f"[bold green]Version {live.version_number} is live[/bold green]")
