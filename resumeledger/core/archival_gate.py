"""Archival gate — hide non-live versions from listings without deleting them.

Archival is a visibility toggle.  It never touches content, numbering or
the master flag, and archived versions stay resolvable by number.
"""

from __future__ import annotations

import logging
import sqlite3

from resumeledger.core.database import Database
from resumeledger.core.errors import BadRequestError, ForbiddenError, NotFoundError
from resumeledger.core.master_resolution import fetch_owned_version
from resumeledger.core.version_store import row_to_summary
from resumeledger.models.versions import VersionSummary

logger = logging.getLogger(__name__)


class ArchivalGate:
    """Guards which versions may be hidden from listings."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def archive(self, owner_id: str, version_id: str) -> VersionSummary:
        """Hide a version from default listings. Idempotent.

        Raises
        ------
        NotFoundError
            No version has this id.
        ForbiddenError
            The version belongs to another owner.
        BadRequestError
            The version is currently live.
        """
        return self._set_archived(owner_id, version_id, archived=True)

    def unarchive(self, owner_id: str, version_id: str) -> VersionSummary:
        """Make an archived version visible in listings again. Idempotent."""
        return self._set_archived(owner_id, version_id, archived=False)

    def _set_archived(
        self, owner_id: str, version_id: str, *, archived: bool
    ) -> VersionSummary:
        def _work(conn: sqlite3.Connection) -> tuple[VersionSummary, bool]:
            found = fetch_owned_version(conn, version_id)
            if found is None:
                raise NotFoundError("Version not found")
            row, ledger = found
            if ledger.owner_id != owner_id:
                raise ForbiddenError("Not authorized to access this version")
            if archived and row["is_master"]:
                raise BadRequestError(
                    "Cannot archive the live version. Create a new version first."
                )
            if bool(row["is_archived"]) == archived:
                return row_to_summary(row), False

            conn.execute(
                "UPDATE versions SET is_archived = ? WHERE version_id = ?",
                (int(archived), version_id),
            )
            summary = row_to_summary(row).model_copy(update={"is_archived": archived})
            return summary, True

        summary, changed = self._db.run_transaction(_work)
        if changed:
            logger.info(
                "%s version %d of ledger %s",
                "Archived" if archived else "Unarchived",
                summary.version_number,
                summary.ledger_id,
            )
        return summary
