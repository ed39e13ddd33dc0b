"""Tests for the archival gate — listing visibility without deletion."""

from __future__ import annotations

import pytest

from resumeledger.core.errors import BadRequestError, ForbiddenError, NotFoundError
from resumeledger.models.versions import LedgerRef


@pytest.fixture
def two_versions(store, alice, c1, c2):
    ref = LedgerRef.main(alice.owner_id)
    return ref, store.create_version(ref, c1), store.create_version(ref, c2)


class TestArchive:
    def test_archive_hides_from_default_listing(self, store, archival, alice, two_versions):
        ref, v1, _ = two_versions
        summary = archival.archive(alice.owner_id, v1.version_id)

        assert summary.is_archived is True
        assert [v.version_number for v in store.list_versions(ref)] == [2]
        listed = store.list_versions(ref, include_archived=True)
        assert [v.version_number for v in listed] == [2, 1]

    def test_archived_version_still_resolvable_by_number(
        self, store, archival, alice, two_versions, c1
    ):
        ref, v1, _ = two_versions
        archival.archive(alice.owner_id, v1.version_id)
        assert store.get_version(ref, 1).content == c1

    def test_archive_is_idempotent(self, archival, alice, two_versions):
        _, v1, _ = two_versions
        archival.archive(alice.owner_id, v1.version_id)
        again = archival.archive(alice.owner_id, v1.version_id)
        assert again.is_archived is True

    def test_cannot_archive_master(self, store, archival, alice, two_versions):
        ref, _, v2 = two_versions
        with pytest.raises(BadRequestError, match="Cannot archive the live version"):
            archival.archive(alice.owner_id, v2.version_id)
        assert store.get_master(ref).is_archived is False

    def test_unknown_version(self, archival, alice):
        with pytest.raises(NotFoundError):
            archival.archive(alice.owner_id, "missing")

    def test_other_owner_forbidden(self, archival, make_owner, store, c1, c2):
        alice = make_owner("alice")
        bob = make_owner("bob")
        ref = LedgerRef.main(alice.owner_id)
        v1 = store.create_version(ref, c1)
        store.create_version(ref, c2)
        with pytest.raises(ForbiddenError):
            archival.archive(bob.owner_id, v1.version_id)

    def test_archiving_does_not_change_hash_or_number(self, store, archival, alice, two_versions):
        ref, v1, _ = two_versions
        archival.archive(alice.owner_id, v1.version_id)
        stored = store.get_version(ref, 1)
        assert stored.content_hash == v1.content_hash
        assert store.verify_ledger(ref) is True


class TestUnarchive:
    def test_unarchive_restores_visibility(self, store, archival, alice, two_versions):
        ref, v1, _ = two_versions
        archival.archive(alice.owner_id, v1.version_id)
        summary = archival.unarchive(alice.owner_id, v1.version_id)
        assert summary.is_archived is False
        assert [v.version_number for v in store.list_versions(ref)] == [2, 1]

    def test_unarchive_visible_version_is_noop(self, archival, alice, two_versions):
        _, v1, _ = two_versions
        assert archival.unarchive(alice.owner_id, v1.version_id).is_archived is False

    def test_archive_locked_profile_version(self, store, profiles, archival, alice, c1):
        store.create_version(LedgerRef.main(alice.owner_id), c1)
        _, first = profiles.create_profile(alice.owner_id, "acme")
        profiles.refresh_profile(alice.owner_id, "acme")

        archival.archive(alice.owner_id, first.version_id)

        visible = profiles.list_profile_versions(alice.owner_id, "acme")
        assert [v.version_number for v in visible] == [2]
