"""``resumeledger owner-add`` — register an owner username."""

from __future__ import annotations

from pathlib import Path

import typer

from resumeledger.cli.commands._common import DB_OPTION, console, service_session


def owner_add_cmd(
    username: str = typer.Argument(..., help="Public username, used in every link."),
    db: Path = DB_OPTION,
) -> None:
    """Register a new owner."""
    with service_session(db) as service:
        owner = service.register_owner(username)
    console.print(f"[bold green]Registered[/bold green] {owner.username}")
    console.print(f"[bold]{owner.owner_id}[/bold]")
