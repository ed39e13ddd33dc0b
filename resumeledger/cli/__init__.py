"""resumeledger CLI — Typer-based command-line interface.

Provides the ``resumeledger`` command for registering owners, publishing
versions, managing locked profiles and resolving public links.  The CLI
acts as the trusted auth collaborator: ``--owner`` names the caller.

All output uses Rich for formatted terminal display.
"""
