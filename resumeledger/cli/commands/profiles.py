"""Locked profile commands: lock, refresh, profiles, profile-versions."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from resumeledger.cli.commands._common import (
    DB_OPTION,
    OWNER_OPTION,
    console,
    service_session,
    versions_table,
)


def lock_cmd(
    name: str = typer.Argument(..., help="Profile name, e.g. the company applied to."),
    owner: str = OWNER_OPTION,
    db: Path = DB_OPTION,
) -> None:
    """Freeze the current live resume into a new locked profile."""
    with service_session(db) as service:
        caller = service.owner_by_username(owner)
        profile, version = service.create_locked_profile(caller.owner_id, name)
    console.print(
        f"[bold green]Locked profile '{profile.name}' created[/bold green] "
        f"at version {version.version_number}: /{owner}/v/{profile.name}"
    )


def refresh_cmd(
    name: str = typer.Argument(..., help="Profile name to refresh."),
    owner: str = OWNER_OPTION,
    db: Path = DB_OPTION,
) -> None:
    """Copy the current live resume into the locked profile as a new version."""
    with service_session(db) as service:
        caller = service.owner_by_username(owner)
        version = service.refresh_locked_profile(caller.owner_id, name)
    console.print(f"Profile '{name}' is now at version {version.version_number}.")


def profiles_cmd(
    owner: str = OWNER_OPTION,
    db: Path = DB_OPTION,
) -> None:
    """List the owner's locked profiles."""
    with service_session(db) as service:
        caller = service.owner_by_username(owner)
        profiles = service.list_locked_profiles(caller.owner_id)

    if not profiles:
        console.print("[dim]No locked profiles.[/dim]")
        return

    table = Table(title=f"Locked profiles of {owner}")
    table.add_column("Name", style="cyan")
    table.add_column("Latest", justify="right")
    table.add_column("Link")
    for p in profiles:
        latest = str(p.latest_version.version_number) if p.latest_version else "-"
        table.add_row(p.name, latest, f"/{owner}/v/{p.name}")
    console.print(table)


def profile_versions_cmd(
    name: str = typer.Argument(..., help="Profile name."),
    owner: str = OWNER_OPTION,
    include_archived: bool = typer.Option(
        False, "--all", "-a", help="Include archived versions."
    ),
    db: Path = DB_OPTION,
) -> None:
    """List a locked profile's versions, newest first."""
    with service_session(db) as service:
        caller = service.owner_by_username(owner)
        versions = service.list_profile_versions(
            caller.owner_id, name, include_archived=include_archived
        )
    console.print(versions_table(f"Versions of {owner}/v/{name}", versions))
