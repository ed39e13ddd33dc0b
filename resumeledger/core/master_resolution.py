"""Master resolution — the "exactly one live version" transition protocol.

Two operations move the master flag:
- ``retarget``: append a new version carrying the given content and make it
  master.  Used by version creation, profile refresh and restore.
- ``MasterResolution.set_live``: restore a past version by copying its
  content into a brand-new master version.  The old version is never
  re-flagged or rewritten.

Both run inside a single write transaction: read the max number, clear the
current master, insert the new master.  No reader ever sees zero or two
masters in a non-empty ledger.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any

from resumeledger.core.database import Database
from resumeledger.core.errors import (
    AlreadyLiveError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
)
from resumeledger.core.hasher import address_of_bytes, canonical_json_bytes
from resumeledger.models.versions import LedgerRef, Version

logger = logging.getLogger(__name__)


def encode_content(content: dict[str, Any]) -> tuple[str, str]:
    """Serialize content canonically. Returns ``(content_json, content_hash)``."""
    try:
        data = canonical_json_bytes(content)
    except (TypeError, ValueError) as exc:
        raise BadRequestError("Resume content must be JSON-serializable") from exc
    return data.decode("utf-8"), address_of_bytes(data)


def next_version_number(conn: sqlite3.Connection, ledger_id: str) -> int:
    """Max existing number in the ledger plus one (1 for an empty ledger)."""
    row = conn.execute(
        "SELECT MAX(version_number) FROM versions WHERE ledger_id = ?",
        (ledger_id,),
    ).fetchone()
    return (row[0] or 0) + 1


def retarget(
    conn: sqlite3.Connection, ledger_id: str, content: dict[str, Any]
) -> Version:
    """Append ``content`` as the new master of ``ledger_id``.

    Must run inside an open write transaction.  Clears the previous master
    before inserting so the one-master index is never violated.
    """
    content_json, content_hash = encode_content(content)
    number = next_version_number(conn, ledger_id)

    conn.execute(
        "UPDATE versions SET is_master = 0 WHERE ledger_id = ? AND is_master = 1",
        (ledger_id,),
    )

    version = Version(
        ledger_id=ledger_id,
        version_number=number,
        content=json.loads(content_json),
        content_hash=content_hash,
        is_master=True,
        is_archived=False,
    )
    conn.execute(
        """
        INSERT INTO versions
            (version_id, ledger_id, version_number, content_json, content_hash,
             is_master, is_archived, created_at)
        VALUES (?, ?, ?, ?, ?, 1, 0, ?)
        """,
        (
            version.version_id,
            ledger_id,
            number,
            content_json,
            content_hash,
            version.created_at.isoformat(),
        ),
    )
    return version


def row_to_version(row: sqlite3.Row) -> Version:
    """Convert a ``versions`` row to a Version."""
    return Version(
        version_id=row["version_id"],
        ledger_id=row["ledger_id"],
        version_number=row["version_number"],
        content=json.loads(row["content_json"]),
        content_hash=row["content_hash"],
        is_master=bool(row["is_master"]),
        is_archived=bool(row["is_archived"]),
        created_at=row["created_at"],
    )


def fetch_owned_version(
    conn: sqlite3.Connection, version_id: str
) -> tuple[sqlite3.Row, LedgerRef] | None:
    """Fetch a version row together with the ref of the ledger holding it."""
    row = conn.execute(
        """
        SELECT v.*, l.owner_id AS owner_id, l.kind AS kind, l.name AS name
        FROM versions v JOIN ledgers l ON l.ledger_id = v.ledger_id
        WHERE v.version_id = ?
        """,
        (version_id,),
    ).fetchone()
    if row is None:
        return None
    ref = LedgerRef(
        owner_id=row["owner_id"],
        kind=row["kind"],
        profile_name=row["name"] or None,
    )
    return row, ref


class MasterResolution:
    """Restore-to-live for any ledger.

    Parameters
    ----------
    db:
        The shared storage resource.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def set_live(self, ledger: LedgerRef, version_id: str) -> Version:
        """Make a past version current by copying it into a new master.

        Raises
        ------
        NotFoundError
            The version does not exist.
        ForbiddenError
            The version is not in the caller's ledger ``ledger``.
        AlreadyLiveError
            The version is already master; nothing is created.
        """

        def _work(conn: sqlite3.Connection) -> tuple[int, Version]:
            found = fetch_owned_version(conn, version_id)
            if found is None:
                raise NotFoundError("Version not found")
            row, owner_ref = found
            if owner_ref != ledger:
                raise ForbiddenError("Not authorized to access this version")
            if row["is_master"]:
                raise AlreadyLiveError()

            target = row_to_version(row)
            return target.version_number, retarget(conn, target.ledger_id, target.content)

        restored_from, live = self._db.run_transaction(_work)
        logger.info(
            "Restored version %d of ledger %s as new live version %d",
            restored_from,
            live.ledger_id,
            live.version_number,
        )
        return live
