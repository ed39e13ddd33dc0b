"""Owner registry — maps public usernames to owner identities.

Credentials live with the auth collaborator; this table only records which
owners exist so the core can refuse writes for unknown owners and resolve
public usernames.
"""

from __future__ import annotations

import logging
import sqlite3

from resumeledger.core.database import Database
from resumeledger.core.errors import BadRequestError, ConflictError, NotFoundError
from resumeledger.models.owners import Owner

logger = logging.getLogger(__name__)


class OwnerRegistry:
    """Create and look up owners."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def register(self, username: str) -> Owner:
        """Register a new owner. Raises ``ConflictError`` if the name is taken."""
        username = (username or "").strip()
        if not username:
            raise BadRequestError("Username is required")
        if "/" in username:
            raise BadRequestError("Username may not contain '/'")

        owner = Owner(username=username)

        def _work(conn: sqlite3.Connection) -> Owner:
            taken = conn.execute(
                "SELECT 1 FROM owners WHERE username = ?", (username,)
            ).fetchone()
            if taken:
                raise ConflictError("Username already exists")
            conn.execute(
                "INSERT INTO owners (owner_id, username, created_at) VALUES (?, ?, ?)",
                (owner.owner_id, owner.username, owner.created_at.isoformat()),
            )
            return owner

        created = self._db.run_transaction(_work)
        logger.info("Registered owner %s (%s)", created.username, created.owner_id)
        return created

    def get(self, owner_id: str) -> Owner:
        with self._db.read() as conn:
            row = conn.execute(
                "SELECT * FROM owners WHERE owner_id = ?", (owner_id,)
            ).fetchone()
        if row is None:
            raise NotFoundError("Owner not found")
        return self._row_to_owner(row)

    def get_by_username(self, username: str) -> Owner:
        with self._db.read() as conn:
            row = conn.execute(
                "SELECT * FROM owners WHERE username = ?", (username,)
            ).fetchone()
        if row is None:
            raise NotFoundError("Resume not found")
        return self._row_to_owner(row)

    @staticmethod
    def _row_to_owner(row: sqlite3.Row) -> Owner:
        return Owner(
            owner_id=row["owner_id"],
            username=row["username"],
            created_at=row["created_at"],
        )
