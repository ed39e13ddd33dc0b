"""Main Typer application — imports and registers all CLI commands.

Entry point: ``resumeledger`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from resumeledger.cli.commands.owners import owner_add_cmd
from resumeledger.cli.commands.profiles import (
    lock_cmd,
    profile_versions_cmd,
    profiles_cmd,
    refresh_cmd,
)
from resumeledger.cli.commands.public import export_cmd, stats_cmd, verify_cmd, view_cmd
from resumeledger.cli.commands.resume import (
    archive_cmd,
    publish_cmd,
    set_live_cmd,
    unarchive_cmd,
    versions_cmd,
)
from resumeledger.config import configure_logging

app = typer.Typer(
    name="resumeledger",
    help="resumeledger: immutable, versioned resumes with permanent public links.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def _main(
    log_level: str = typer.Option(None, "--log-level", help="Override the log level."),
) -> None:
    configure_logging(log_level)


# Register subcommands
app.command(name="owner-add", help="Register an owner username.")(owner_add_cmd)
app.command(name="publish", help="Publish a new live version from a JSON file.")(publish_cmd)
app.command(name="versions", help="List main-ledger versions.")(versions_cmd)
app.command(name="archive", help="Hide a non-live version from listings.")(archive_cmd)
app.command(name="unarchive", help="Show an archived version again.")(unarchive_cmd)
app.command(name="set-live", help="Restore a past version as a new live version.")(set_live_cmd)
app.command(name="lock", help="Create a locked profile from the live resume.")(lock_cmd)
app.command(name="refresh", help="Refresh a locked profile from the live resume.")(refresh_cmd)
app.command(name="profiles", help="List locked profiles.")(profiles_cmd)
app.command(name="profile-versions", help="List a locked profile's versions.")(profile_versions_cmd)
app.command(name="view", help="Resolve a public link.")(view_cmd)
app.command(name="export", help="Export a resume through a renderer.")(export_cmd)
app.command(name="stats", help="Show view analytics.")(stats_cmd)
app.command(name="verify", help="Audit ledger integrity.")(verify_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
