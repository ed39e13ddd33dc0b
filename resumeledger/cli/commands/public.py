"""Public-side commands: view, export, stats, verify."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.panel import Panel

from resumeledger.cli.commands._common import (
    DB_OPTION,
    OWNER_OPTION,
    console,
    service_session,
)
from resumeledger.models.analytics import ViewMetadata


def view_cmd(
    path: str = typer.Argument(..., help="Public path, e.g. /alice or /alice/v/acme/2."),
    country: str = typer.Option(None, help="Viewer country, recorded for analytics."),
    device: str = typer.Option(None, help="Viewer device type, recorded for analytics."),
    referrer: str = typer.Option(None, help="Referrer, recorded for analytics."),
    db: Path = DB_OPTION,
) -> None:
    """Resolve a public link and print the snapshot it points to."""
    metadata = ViewMetadata(country=country, device=device, referrer=referrer)
    with service_session(db) as service:
        view = service.view(path, metadata)

    version = view.version
    console.print(
        Panel(
            json.dumps(version.content, indent=2, sort_keys=True),
            title=f"[bold]{view.address.to_path()}[/bold] -> version {version.version_number}",
            subtitle=version.content_hash,
            border_style="green" if version.is_master else "blue",
        )
    )


def export_cmd(
    owner: str = OWNER_OPTION,
    profile: str = typer.Option(None, "--profile", "-p", help="Export a locked profile."),
    template: str = typer.Option(None, "--template", "-t", help="Renderer template id."),
    output: Path = typer.Option(None, "--output", help="Write to a file instead of stdout."),
    db: Path = DB_OPTION,
) -> None:
    """Export the live resume (or a locked profile) through a renderer."""
    with service_session(db) as service:
        caller = service.owner_by_username(owner)
        if profile:
            data = service.export_locked(caller.owner_id, profile, template)
        else:
            data = service.export_master(caller.owner_id, template)

    if output is not None:
        output.write_bytes(data)
        console.print(f"Wrote {len(data)} bytes to {output}")
    else:
        typer.echo(data.decode("utf-8", errors="replace"))


def stats_cmd(
    owner: str = OWNER_OPTION,
    db: Path = DB_OPTION,
) -> None:
    """Show headline view counts for the owner's public links."""
    with service_session(db) as service:
        caller = service.owner_by_username(owner)
        summary = service.analytics_summary(caller.owner_id)
    console.print(
        "\n".join([
            f"[bold]Total views:[/bold]   {summary.total_views}",
            f"[bold]Countries:[/bold]     {summary.countries_count}",
            f"[bold]Desktop views:[/bold] {summary.desktop_views}",
            f"[bold]Mobile views:[/bold]  {summary.mobile_views}",
        ])
    )


def verify_cmd(
    owner: str = OWNER_OPTION,
    db: Path = DB_OPTION,
) -> None:
    """Audit every ledger of the owner for numbering, master and hash integrity."""
    with service_session(db) as service:
        caller = service.owner_by_username(owner)
        service.verify(caller.owner_id)
    console.print("[green]All ledgers valid.[/green]")
