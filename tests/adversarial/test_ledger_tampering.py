"""Adversarial tests — direct storage tampering.

These tests verify that the storage layer and the ledger audit catch:
1. Rewrites of stored content or numbering
2. Deleted versions
3. A second master in one ledger
4. Content changed behind the triggers' back
"""

from __future__ import annotations

import sqlite3

import pytest

from resumeledger.core.errors import LedgerIntegrityError
from resumeledger.models.versions import LedgerRef


@pytest.fixture
def seeded(store, alice, make_content):
    """Seed alice's main ledger with 3 versions."""
    ref = LedgerRef.main(alice.owner_id)
    for i in range(3):
        store.create_version(ref, make_content(f"h{i}"))
    return ref


@pytest.fixture
def raw(db_path):
    conn = sqlite3.connect(str(db_path))
    yield conn
    conn.close()


class TestImmutabilityGuards:
    def test_content_rewrite_blocked(self, seeded, raw):
        with pytest.raises(sqlite3.IntegrityError, match="immutable"):
            raw.execute("UPDATE versions SET content_json = '{}' WHERE version_number = 1")

    def test_renumbering_blocked(self, seeded, raw):
        with pytest.raises(sqlite3.IntegrityError, match="immutable"):
            raw.execute("UPDATE versions SET version_number = 9 WHERE version_number = 1")

    def test_delete_blocked(self, seeded, raw):
        with pytest.raises(sqlite3.IntegrityError, match="append-only"):
            raw.execute("DELETE FROM versions WHERE version_number = 2")

    def test_second_master_blocked(self, seeded, raw):
        with pytest.raises(sqlite3.IntegrityError, match="UNIQUE"):
            raw.execute("UPDATE versions SET is_master = 1 WHERE version_number = 1")

    def test_duplicate_number_blocked(self, seeded, raw, store):
        row = raw.execute(
            "SELECT ledger_id FROM versions WHERE version_number = 1"
        ).fetchone()
        with pytest.raises(sqlite3.IntegrityError, match="UNIQUE"):
            raw.execute(
                "INSERT INTO versions (version_id, ledger_id, version_number, content_json, "
                "content_hash, is_master, is_archived, created_at) "
                "VALUES ('x', ?, 2, '{}', 'sha256:0', 0, 0, '2024-01-01')",
                (row[0],),
            )


class TestAuditDetectsTampering:
    def test_rewritten_content_detected(self, seeded, raw, store):
        raw.execute("DROP TRIGGER trg_versions_immutable")
        raw.execute(
            "UPDATE versions SET content_json = '{\"headline\":\"forged\"}' "
            "WHERE version_number = 2"
        )
        raw.commit()

        with pytest.raises(LedgerIntegrityError, match="Tampered"):
            store.verify_ledger(seeded)

    def test_deleted_version_detected(self, seeded, raw, store):
        raw.execute("DROP TRIGGER trg_versions_no_delete")
        raw.execute("DELETE FROM versions WHERE version_number = 2")
        raw.commit()

        with pytest.raises(LedgerIntegrityError, match="expected version 2"):
            store.verify_ledger(seeded)

    def test_missing_master_detected(self, seeded, raw, store):
        raw.execute("UPDATE versions SET is_master = 0")
        raw.commit()

        with pytest.raises(LedgerIntegrityError, match="0 master"):
            store.verify_ledger(seeded)
