"""Integration tests — full resume lifecycle through ResumeService.

Walks the publish, archive, restore, lock and public-view flows end to end
against a real SQLite database.
"""

from __future__ import annotations

import threading

import pytest

from resumeledger.core.errors import BadRequestError, ForbiddenError, NotFoundError
from resumeledger.models.analytics import ViewMetadata


@pytest.fixture
def owner(service):
    return service.register_owner("alice")


@pytest.fixture
def published(service, owner, c1, c2):
    """Owner with two main-ledger versions: 1 -> c1, 2 -> c2 (live)."""
    v1 = service.create_version(owner.owner_id, c1)
    v2 = service.create_version(owner.owner_id, c2)
    return owner, v1, v2


class TestMainLedgerLifecycle:
    def test_first_publish_becomes_master(self, service, owner, c1):
        created = service.create_version(owner.owner_id, c1)
        assert created.version_number == 1
        assert created.is_master is True

        live = service.get_master(owner.owner_id)
        assert live.version_id == created.version_id
        assert live.content == c1

    def test_second_publish_keeps_history(self, service, published, c1, c2):
        owner, _, v2 = published
        assert v2.version_number == 2
        assert service.get_master(owner.owner_id).content == c2
        first = service.view("/alice/1").version
        assert (first.is_master, first.content) == (False, c1)

    def test_archive_rules(self, service, published, c1):
        owner, v1, v2 = published
        with pytest.raises(BadRequestError):
            service.archive_version(owner.owner_id, v2.version_id)

        service.archive_version(owner.owner_id, v1.version_id)

        listed = service.list_versions(owner.owner_id)
        assert [v.version_number for v in listed] == [2]
        assert service.view("/alice/1").version.content == c1

    def test_set_live_copies_forward(self, service, published, c1):
        owner, v1, _ = published
        live = service.set_live(owner.owner_id, v1.version_id)

        assert (live.version_number, live.is_master, live.content) == (3, True, c1)
        history = {
            v.version_number: v
            for v in service.list_versions(owner.owner_id, include_archived=True)
        }
        assert history[2].is_master is False
        assert history[1].is_master is False
        assert history[1].content_hash == v1.content_hash

    def test_set_live_on_other_owners_version(self, service, published):
        _, v1, _ = published
        mallory = service.register_owner("mallory")
        with pytest.raises(ForbiddenError):
            service.set_live(mallory.owner_id, v1.version_id)

    def test_verify_after_full_history(self, service, published):
        owner, v1, _ = published
        service.archive_version(owner.owner_id, v1.version_id)
        service.set_live(owner.owner_id, v1.version_id)
        assert service.verify(owner.owner_id) is True


class TestLockedProfileLifecycle:
    def test_lock_requires_master(self, service, owner):
        with pytest.raises(BadRequestError):
            service.create_locked_profile(owner.owner_id, "acme")

    def test_locked_link_is_frozen_until_refresh(self, service, published, make_content, c2):
        owner, _, _ = published
        service.create_locked_profile(owner.owner_id, "acme")
        c3 = make_content("Principal Engineer")
        service.create_version(owner.owner_id, c3)

        assert service.view("/alice/v/acme").version.content == c2
        assert service.view("/alice").version.content == c3

        service.refresh_locked_profile(owner.owner_id, "acme")

        assert service.view("/alice/v/acme").version.content == c3
        assert service.view("/alice/v/acme/1").version.content == c2

    def test_set_live_inside_locked_ledger(self, service, published, make_content, c2):
        owner, _, _ = published
        _, first = service.create_locked_profile(owner.owner_id, "acme")
        service.create_version(owner.owner_id, make_content("Principal Engineer"))
        service.refresh_locked_profile(owner.owner_id, "acme")

        restored = service.set_live(owner.owner_id, first.version_id)

        assert restored.version_number == 3
        assert service.view("/alice/v/acme").version.content == c2
        assert len(service.list_versions(owner.owner_id)) == 3

    def test_export_locked_and_master(self, service, published):
        owner, _, _ = published
        service.create_locked_profile(owner.owner_id, "acme")
        assert service.export_locked(owner.owner_id, "acme") == service.export_master(
            owner.owner_id
        )

    def test_export_unsaved_content(self, service, owner):
        data = service.export_master(owner.owner_id, content={"name": "Draft"})
        assert data == b'{"name":"Draft"}'

    def test_export_without_master(self, service, owner):
        with pytest.raises(NotFoundError):
            service.export_master(owner.owner_id)


class TestPublicAnalytics:
    def test_views_feed_summary(self, service, published):
        owner, _, _ = published
        service.view("/alice", ViewMetadata(country="NL", device="mobile"))
        service.view("/alice/1", ViewMetadata(country="US"))
        with pytest.raises(NotFoundError):
            service.view("/alice/99")

        summary = service.analytics_summary(owner.owner_id)
        assert summary.total_views == 2
        assert summary.countries_count == 2
        assert summary.mobile_views == 1


class TestConcurrentPublish:
    def test_two_writers_from_version_one(self, service, owner, c1, make_content):
        service.create_version(owner.owner_id, c1)
        barrier = threading.Barrier(2)
        results = []
        errors = []

        def _publish(headline):
            barrier.wait()
            try:
                results.append(
                    service.create_version(owner.owner_id, make_content(headline))
                )
            except Exception as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=_publish, args=(h,)) for h in ("A", "B")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert sorted(v.version_number for v in results) == [2, 3]
        masters = [v for v in service.list_versions(owner.owner_id) if v.is_master]
        assert [v.version_number for v in masters] == [3]
