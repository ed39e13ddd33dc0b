"""Shared helpers for CLI commands: service construction and error output."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from resumeledger.config import config
from resumeledger.core.errors import ResumeLedgerError, describe_error
from resumeledger.core.service import ResumeService
from resumeledger.models.versions import VersionSummary

console = Console()

DB_OPTION = typer.Option(
    None,
    "--db",
    help="Path to the resume database (defaults to RESUMELEDGER_DATABASE_PATH).",
)
OWNER_OPTION = typer.Option(..., "--owner", "-o", help="Username of the acting owner.")


@contextmanager
def service_session(db: Path | None) -> Iterator[ResumeService]:
    """Open a service for one command; taxonomy errors exit with code 1."""
    try:
        with ResumeService(config, database_path=db) as service:
            yield service
    except ResumeLedgerError as exc:
        code, message = describe_error(exc)
        console.print(f"[red]{code}:[/red] {message}")
        raise typer.Exit(code=1) from None


def versions_table(title: str, versions: list[VersionSummary]) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Version ID", style="dim")
    table.add_column("Live", justify="center")
    table.add_column("Archived", justify="center")
    table.add_column("Created (UTC)")
    for v in versions:
        table.add_row(
            str(v.version_number),
            v.version_id,
            "[green]Yes[/green]" if v.is_master else "",
            "[yellow]Yes[/yellow]" if v.is_archived else "",
            v.created_at.strftime("%Y-%m-%d %H:%M:%S"),
        )
    return table
