"""Process-wide storage resource backed by SQLite.

One ``Database`` is created at start-up and injected into every component.
Each unit of work gets its own connection; the Database object owns the
schema, the write budgets and the transaction protocol.

Design:
- WAL journal mode so readers never block on the single writer.
- Writes start with ``BEGIN IMMEDIATE``: the write lock is taken before the
  first read, so two writers never observe the same "max version number".
- Wait budget: SQLite busy timeout.  Execution budget: a progress handler
  that interrupts the running statement once the deadline passes.
- Any exception, including cancellation, rolls the transaction back.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TypeVar

from resumeledger.core.errors import (
    ConflictError,
    InternalError,
    ResumeLedgerError,
    TransactionTimeoutError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS owners (
        owner_id    TEXT PRIMARY KEY,
        username    TEXT NOT NULL UNIQUE,
        created_at  TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ledgers (
        ledger_id   TEXT PRIMARY KEY,
        owner_id    TEXT NOT NULL REFERENCES owners(owner_id),
        kind        TEXT NOT NULL CHECK (kind IN ('master', 'locked')),
        name        TEXT NOT NULL DEFAULT '',
        created_at  TEXT NOT NULL,
        UNIQUE (owner_id, kind, name)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS versions (
        version_id      TEXT PRIMARY KEY,
        ledger_id       TEXT NOT NULL REFERENCES ledgers(ledger_id),
        version_number  INTEGER NOT NULL CHECK (version_number > 0),
        content_json    TEXT NOT NULL,
        content_hash    TEXT NOT NULL,
        is_master       INTEGER NOT NULL DEFAULT 0,
        is_archived     INTEGER NOT NULL DEFAULT 0,
        created_at      TEXT NOT NULL,
        UNIQUE (ledger_id, version_number)
    )
    """,
    # At most one committed master per ledger.
    """
    CREATE UNIQUE INDEX IF NOT EXISTS idx_versions_one_master
        ON versions(ledger_id) WHERE is_master = 1
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_versions_ledger_number
        ON versions(ledger_id, version_number DESC)
    """,
    """
    CREATE TABLE IF NOT EXISTS analytics_events (
        id              INTEGER PRIMARY KEY AUTOINCREMENT,
        event_id        TEXT NOT NULL UNIQUE,
        username        TEXT NOT NULL,
        ledger_kind     TEXT NOT NULL,
        profile_name    TEXT,
        version_number  INTEGER,
        viewed_at       TEXT NOT NULL,
        country         TEXT NOT NULL DEFAULT 'Unknown',
        city            TEXT NOT NULL DEFAULT 'Unknown',
        device          TEXT NOT NULL DEFAULT 'Desktop',
        browser         TEXT NOT NULL DEFAULT 'Unknown',
        referrer        TEXT NOT NULL DEFAULT 'Direct',
        user_agent      TEXT,
        extra_json      TEXT NOT NULL DEFAULT '{}'
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_analytics_username
        ON analytics_events(username, viewed_at)
    """,
)

# Immutability guards: content and numbering are never rewritten, versions
# are never deleted.
_TRIGGERS = (
    """
    CREATE TRIGGER IF NOT EXISTS trg_versions_immutable
    BEFORE UPDATE OF version_id, ledger_id, version_number, content_json,
                     content_hash, created_at ON versions
    BEGIN
        SELECT RAISE(ABORT, 'version content is immutable');
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS trg_versions_no_delete
    BEFORE DELETE ON versions
    BEGIN
        SELECT RAISE(ABORT, 'versions are append-only');
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS trg_analytics_append_only
    BEFORE UPDATE ON analytics_events
    BEGIN
        SELECT RAISE(ABORT, 'analytics events are append-only');
    END
    """,
)

_PROGRESS_STEPS = 1000


def _is_lock_contention(exc: sqlite3.Error) -> bool:
    message = str(exc).lower()
    return "locked" in message or "busy" in message


class Database:
    """Shared SQLite storage handle with an explicit lifecycle.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file. Created if it does not exist.
    wait_seconds:
        How long a writer may queue for the write lock.
    timeout_seconds:
        How long a single transaction may execute before it is aborted.
    max_retries:
        How many times ``run_transaction`` re-runs work that lost a
        write-write race.
    """

    def __init__(
        self,
        db_path: Path,
        *,
        wait_seconds: float = 10.0,
        timeout_seconds: float = 50.0,
        max_retries: int = 3,
    ) -> None:
        self._db_path = Path(db_path)
        self.wait_seconds = wait_seconds
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self._opened = False

    @property
    def path(self) -> Path:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._opened

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> Database:
        """Create the database file and schema. Safe to call twice."""
        if self._opened:
            return self
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            for statement in _SCHEMA + _TRIGGERS:
                conn.execute(statement)
        except sqlite3.Error as exc:
            raise InternalError(f"Schema initialization failed: {exc}") from exc
        finally:
            conn.close()
        self._opened = True
        logger.info("Database ready at %s", self._db_path)
        return self

    def close(self) -> None:
        """Mark the resource closed; later use raises ``InternalError``."""
        self._opened = False
        logger.debug("Database at %s closed", self._db_path)

    def __enter__(self) -> Database:
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _connect(self, wait_seconds: float | None = None) -> sqlite3.Connection:
        conn = sqlite3.connect(
            str(self._db_path),
            timeout=self.wait_seconds if wait_seconds is None else wait_seconds,
            isolation_level=None,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    def _require_open(self) -> None:
        if not self._opened:
            raise InternalError("Database has not been opened")

    # ------------------------------------------------------------------
    # Units of work
    # ------------------------------------------------------------------

    @contextmanager
    def read(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection for read-only queries.

        Storage failures surface as ``InternalError``; taxonomy errors raised
        by the caller pass through untouched.
        """
        self._require_open()
        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise InternalError(f"Cannot connect to storage: {exc}") from exc
        try:
            yield conn
        except sqlite3.Error as exc:
            raise InternalError(f"Storage read failed: {exc}") from exc
        finally:
            conn.close()

    @contextmanager
    def transaction(
        self, *, wait_seconds: float | None = None
    ) -> Iterator[sqlite3.Connection]:
        """Scoped write transaction: commit on success, roll back on anything else.

        ``wait_seconds`` overrides the wait budget for this transaction only.

        Raises
        ------
        TransactionTimeoutError
            If the write lock could not be acquired within the wait budget,
            or the work ran past the execution budget.
        """
        self._require_open()
        wait = self.wait_seconds if wait_seconds is None else wait_seconds
        try:
            conn = self._connect(wait)
        except sqlite3.Error as exc:
            raise InternalError(f"Cannot connect to storage: {exc}") from exc
        deadline = time.monotonic() + self.timeout_seconds
        timed_out = False

        def _watchdog() -> int:
            nonlocal timed_out
            if time.monotonic() > deadline:
                timed_out = True
                return 1
            return 0

        conn.set_progress_handler(_watchdog, _PROGRESS_STEPS)
        try:
            try:
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.OperationalError as exc:
                if _is_lock_contention(exc):
                    raise TransactionTimeoutError(
                        f"Write lock not acquired within {wait}s"
                    ) from exc
                raise InternalError(f"Cannot begin transaction: {exc}") from exc
            try:
                yield conn
                if time.monotonic() > deadline:
                    timed_out = True
                    raise TransactionTimeoutError(
                        f"Transaction exceeded {self.timeout_seconds}s"
                    )
                conn.set_progress_handler(None, 0)
                conn.execute("COMMIT")
            except BaseException:
                conn.set_progress_handler(None, 0)
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
        except sqlite3.IntegrityError:
            raise
        except sqlite3.OperationalError as exc:
            if timed_out:
                raise TransactionTimeoutError(
                    f"Transaction exceeded {self.timeout_seconds}s"
                ) from exc
            if _is_lock_contention(exc):
                raise TransactionTimeoutError(
                    f"Write lock not acquired within {wait}s"
                ) from exc
            raise InternalError(f"Storage write failed: {exc}") from exc
        except sqlite3.Error as exc:
            raise InternalError(f"Storage write failed: {exc}") from exc
        finally:
            conn.set_progress_handler(None, 0)
            conn.close()

    def run_transaction(
        self,
        work: Callable[[sqlite3.Connection], T],
        *,
        conflict_message: str = "Concurrent update detected, try again",
        max_retries: int | None = None,
        wait_seconds: float | None = None,
    ) -> T:
        """Run ``work(conn)`` in a write transaction, retrying lost races.

        Uniqueness collisions and lock timeouts are retried up to
        ``max_retries`` times; after that a retryable ``ConflictError`` is
        raised. Taxonomy errors raised by ``work`` abort immediately.

        ``max_retries`` and ``wait_seconds`` override the instance budgets
        for callers that must not queue behind other writers.
        """
        retries = self.max_retries if max_retries is None else max_retries
        attempt = 0
        while True:
            attempt += 1
            try:
                with self.transaction(wait_seconds=wait_seconds) as conn:
                    return work(conn)
            except ResumeLedgerError as exc:
                if not isinstance(exc, TransactionTimeoutError):
                    raise
                if attempt > retries:
                    raise
                logger.warning(
                    "Transaction attempt %d timed out, retrying: %s", attempt, exc
                )
            except sqlite3.IntegrityError as exc:
                if attempt > retries:
                    logger.error("Write conflict not resolved after %d attempts", attempt)
                    raise ConflictError(conflict_message, retryable=True) from exc
                logger.warning(
                    "Write conflict on attempt %d, retrying: %s", attempt, exc
                )
