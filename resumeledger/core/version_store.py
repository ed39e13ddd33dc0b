"""Version Store — append-only, sequentially numbered resume snapshots.

Design:
- Append-only: versions are inserted, never updated in content, never deleted.
- Numbering: (max existing number in the ledger) + 1, starting at 1.
- Every new version is created as master via the master resolution protocol.
- Direct numeric lookup ignores archived and master flags.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Any

from resumeledger.core.database import Database
from resumeledger.core.errors import (
    BadRequestError,
    LedgerIntegrityError,
    NotFoundError,
)
from resumeledger.core.hasher import address_of_bytes
from resumeledger.core.master_resolution import (
    fetch_owned_version,
    retarget,
    row_to_version,
)
from resumeledger.models.versions import LedgerKind, LedgerRef, Version, VersionSummary

logger = logging.getLogger(__name__)

_SUMMARY_COLUMNS = (
    "version_id, ledger_id, version_number, content_hash, is_master, is_archived, created_at"
)


# ---------------------------------------------------------------------------
# Ledger helpers (shared with the locked profile manager)
# ---------------------------------------------------------------------------


def find_ledger_id(conn: sqlite3.Connection, ledger: LedgerRef) -> str | None:
    row = conn.execute(
        "SELECT ledger_id FROM ledgers WHERE owner_id = ? AND kind = ? AND name = ?",
        (ledger.owner_id, ledger.kind.value, ledger.storage_name),
    ).fetchone()
    return row[0] if row else None


def create_ledger(conn: sqlite3.Connection, ledger: LedgerRef) -> str:
    ledger_id = uuid.uuid4().hex
    conn.execute(
        "INSERT INTO ledgers (ledger_id, owner_id, kind, name, created_at) "
        "VALUES (?, ?, ?, ?, ?)",
        (
            ledger_id,
            ledger.owner_id,
            ledger.kind.value,
            ledger.storage_name,
            datetime.now(timezone.utc).isoformat(),
        ),
    )
    return ledger_id


def owner_exists(conn: sqlite3.Connection, owner_id: str) -> bool:
    row = conn.execute("SELECT 1 FROM owners WHERE owner_id = ?", (owner_id,)).fetchone()
    return row is not None


def row_to_summary(row: sqlite3.Row) -> VersionSummary:
    return VersionSummary(
        version_id=row["version_id"],
        ledger_id=row["ledger_id"],
        version_number=row["version_number"],
        content_hash=row["content_hash"],
        is_master=bool(row["is_master"]),
        is_archived=bool(row["is_archived"]),
        created_at=row["created_at"],
    )


def _missing(ledger: LedgerRef) -> NotFoundError:
    if ledger.kind is LedgerKind.LOCKED:
        return NotFoundError("Locked profile not found")
    return NotFoundError("Resume not found")


class VersionStore:
    """Append-only store of resume versions, one ledger per owner/profile.

    Parameters
    ----------
    db:
        The shared storage resource.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    # ------------------------------------------------------------------
    # Core: append-only write
    # ------------------------------------------------------------------

    def create_version(self, ledger: LedgerRef, content: dict[str, Any]) -> Version:
        """Append ``content`` as a new master version of ``ledger``.

        The owner's main ledger is created on first use.  A locked ledger
        must already exist (see ``LockedProfileManager.create_profile``).
        """
        if not content:
            raise BadRequestError("Resume content is required")

        def _work(conn: sqlite3.Connection) -> Version:
            if not owner_exists(conn, ledger.owner_id):
                raise NotFoundError("Owner not found")
            ledger_id = find_ledger_id(conn, ledger)
            if ledger_id is None:
                if ledger.kind is LedgerKind.LOCKED:
                    raise _missing(ledger)
                ledger_id = create_ledger(conn, ledger)
                logger.info("Created main ledger %s for owner %s", ledger_id, ledger.owner_id)
            return retarget(conn, ledger_id, content)

        version = self._db.run_transaction(_work)
        logger.info(
            "Created version %d in %s ledger %s",
            version.version_number,
            ledger.kind.value,
            version.ledger_id,
        )
        return version

    # ------------------------------------------------------------------
    # Query methods (read-only)
    # ------------------------------------------------------------------

    def list_versions(
        self, ledger: LedgerRef, *, include_archived: bool = False
    ) -> list[VersionSummary]:
        """Return version summaries, newest first.

        An owner who has never published gets an empty list; an unknown
        locked profile raises ``NotFoundError``.
        """
        with self._db.read() as conn:
            ledger_id = find_ledger_id(conn, ledger)
            if ledger_id is None:
                if ledger.kind is LedgerKind.LOCKED:
                    raise _missing(ledger)
                return []
            query = f"SELECT {_SUMMARY_COLUMNS} FROM versions WHERE ledger_id = ?"
            if not include_archived:
                query += " AND is_archived = 0"
            query += " ORDER BY version_number DESC"
            rows = conn.execute(query, (ledger_id,)).fetchall()
        return [row_to_summary(row) for row in rows]

    def get_version(self, ledger: LedgerRef, version_number: int) -> Version:
        """Return the exact version by number, whatever its flags."""
        with self._db.read() as conn:
            ledger_id = find_ledger_id(conn, ledger)
            if ledger_id is None:
                raise _missing(ledger)
            row = conn.execute(
                "SELECT * FROM versions WHERE ledger_id = ? AND version_number = ?",
                (ledger_id, version_number),
            ).fetchone()
        if row is None:
            raise NotFoundError("Resume version not found")
        return row_to_version(row)

    def get_master(self, ledger: LedgerRef) -> Version:
        """Return the current live version of ``ledger``."""
        with self._db.read() as conn:
            ledger_id = find_ledger_id(conn, ledger)
            if ledger_id is None:
                raise _missing(ledger)
            row = conn.execute(
                "SELECT * FROM versions WHERE ledger_id = ? AND is_master = 1",
                (ledger_id,),
            ).fetchone()
        if row is None:
            raise _missing(ledger)
        return row_to_version(row)

    def find_version(self, version_id: str) -> tuple[Version, LedgerRef]:
        """Look a version up by id, returning it with its ledger's ref."""
        with self._db.read() as conn:
            found = fetch_owned_version(conn, version_id)
        if found is None:
            raise NotFoundError("Version not found")
        row, ledger = found
        return row_to_version(row), ledger

    # ------------------------------------------------------------------
    # Integrity audit
    # ------------------------------------------------------------------

    def verify_ledger(self, ledger: LedgerRef) -> bool:
        """Check a ledger's invariants against storage.

        Verifies that numbers are exactly 1..n, that a non-empty ledger has
        exactly one master and that every stored content still hashes to the
        address recorded at creation.

        Returns True if the ledger is valid, raises LedgerIntegrityError otherwise.
        """
        with self._db.read() as conn:
            ledger_id = find_ledger_id(conn, ledger)
            if ledger_id is None:
                return True
            rows = conn.execute(
                "SELECT version_id, version_number, content_json, content_hash, is_master "
                "FROM versions WHERE ledger_id = ? ORDER BY version_number ASC",
                (ledger_id,),
            ).fetchall()

        for expected, row in enumerate(rows, start=1):
            if row["version_number"] != expected:
                raise LedgerIntegrityError(
                    f"Ledger {ledger_id}: expected version {expected}, "
                    f"found {row['version_number']}"
                )
            actual_hash = address_of_bytes(row["content_json"].encode("utf-8"))
            if actual_hash != row["content_hash"]:
                raise LedgerIntegrityError(
                    f"Tampered version {row['version_id']}: "
                    f"expected hash={row['content_hash']!r}, got {actual_hash!r}"
                )

        masters = sum(1 for row in rows if row["is_master"])
        if rows and masters != 1:
            raise LedgerIntegrityError(
                f"Ledger {ledger_id} has {masters} master versions, expected 1"
            )
        return True
