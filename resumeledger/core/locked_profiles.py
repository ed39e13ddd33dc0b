"""Locked Profile Manager — named forks of the owner's master ledger.

A locked profile is a second ledger, keyed by (owner, name), seeded with
the current main-ledger master at creation and advanced only by an explicit
refresh.  Profiles are forks, not links: content is copied by value.

The main ledger is read in its own read; the locked ledger is written in a
separate transaction.  A profile may briefly lag the master; that is accepted.
"""

from __future__ import annotations

import logging
import sqlite3

from resumeledger.core.database import Database
from resumeledger.core.errors import BadRequestError, ConflictError, NotFoundError
from resumeledger.core.master_resolution import retarget
from resumeledger.core.version_store import (
    VersionStore,
    create_ledger,
    find_ledger_id,
    owner_exists,
    row_to_summary,
)
from resumeledger.models.profiles import LockedProfile, ProfileSummary
from resumeledger.models.versions import LedgerKind, LedgerRef, Version, VersionSummary

logger = logging.getLogger(__name__)


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise BadRequestError("Profile name is required")
    if "/" in cleaned:
        raise BadRequestError("Profile name may not contain '/'")
    return cleaned


class LockedProfileManager:
    """Create, refresh and list an owner's locked profiles.

    Parameters
    ----------
    db:
        The shared storage resource.
    store:
        Version store used for master reads and locked-ledger listings.
    """

    def __init__(self, db: Database, store: VersionStore) -> None:
        self._db = db
        self._store = store

    def _current_master(self, owner_id: str, action: str) -> Version:
        with self._db.read() as conn:
            if not owner_exists(conn, owner_id):
                raise NotFoundError("Owner not found")
        try:
            return self._store.get_master(LedgerRef.main(owner_id))
        except NotFoundError:
            raise BadRequestError(f"No master resume found to {action}") from None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_profile(self, owner_id: str, name: str) -> tuple[LockedProfile, Version]:
        """Fork the current master into a new locked profile named ``name``.

        Raises
        ------
        BadRequestError
            Missing name, or the owner has no master version yet.
        ConflictError
            The owner already has a profile with this name.
        """
        name = _clean_name(name)
        master = self._current_master(owner_id, "lock")
        ledger = LedgerRef.locked(owner_id, name)

        def _work(conn: sqlite3.Connection) -> tuple[LockedProfile, Version]:
            if find_ledger_id(conn, ledger) is not None:
                raise ConflictError("Profile name already exists")
            ledger_id = create_ledger(conn, ledger)
            version = retarget(conn, ledger_id, master.content)
            row = conn.execute(
                "SELECT created_at FROM ledgers WHERE ledger_id = ?", (ledger_id,)
            ).fetchone()
            profile = LockedProfile(
                ledger_id=ledger_id,
                owner_id=owner_id,
                name=name,
                created_at=row["created_at"],
            )
            return profile, version

        profile, version = self._db.run_transaction(
            _work, conflict_message="Profile name already exists"
        )
        logger.info(
            "Locked profile %r for owner %s from master version %d",
            name,
            owner_id,
            master.version_number,
        )
        return profile, version

    def refresh_profile(self, owner_id: str, name: str) -> Version:
        """Append the owner's current master content to the locked profile.

        Always copies from the live main-ledger master, never from inside
        the locked ledger.
        """
        profile = self.get_profile(owner_id, name)
        master = self._current_master(owner_id, "snapshot")
        version = self._store.create_version(
            LedgerRef.locked(owner_id, profile.name), master.content
        )
        logger.info(
            "Refreshed locked profile %r to version %d from master version %d",
            profile.name,
            version.version_number,
            master.version_number,
        )
        return version

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_profile(self, owner_id: str, name: str) -> LockedProfile:
        with self._db.read() as conn:
            row = conn.execute(
                "SELECT * FROM ledgers WHERE owner_id = ? AND kind = ? AND name = ?",
                (owner_id, LedgerKind.LOCKED.value, (name or "").strip()),
            ).fetchone()
        if row is None:
            raise NotFoundError("Locked profile not found")
        return LockedProfile(
            ledger_id=row["ledger_id"],
            owner_id=row["owner_id"],
            name=row["name"],
            created_at=row["created_at"],
        )

    def list_profiles(self, owner_id: str) -> list[ProfileSummary]:
        """Return every locked profile of the owner with its latest version."""
        with self._db.read() as conn:
            ledgers = conn.execute(
                "SELECT ledger_id, name, created_at FROM ledgers "
                "WHERE owner_id = ? AND kind = ? ORDER BY created_at ASC, name ASC",
                (owner_id, LedgerKind.LOCKED.value),
            ).fetchall()
            summaries: list[ProfileSummary] = []
            for ledger in ledgers:
                latest = conn.execute(
                    "SELECT * FROM versions WHERE ledger_id = ? "
                    "ORDER BY version_number DESC LIMIT 1",
                    (ledger["ledger_id"],),
                ).fetchone()
                summaries.append(
                    ProfileSummary(
                        name=ledger["name"],
                        created_at=ledger["created_at"],
                        latest_version=row_to_summary(latest) if latest else None,
                    )
                )
        return summaries

    def list_profile_versions(
        self, owner_id: str, name: str, *, include_archived: bool = False
    ) -> list[VersionSummary]:
        """Return the profile's versions, newest first."""
        return self._store.list_versions(
            LedgerRef.locked(owner_id, (name or "").strip()),
            include_archived=include_archived,
        )
