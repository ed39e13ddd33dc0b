"""Shared test fixtures for resumeledger."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from resumeledger.analytics.recorder import AnalyticsRecorder
from resumeledger.config import ServiceConfig
from resumeledger.core.archival_gate import ArchivalGate
from resumeledger.core.database import Database
from resumeledger.core.locked_profiles import LockedProfileManager
from resumeledger.core.master_resolution import MasterResolution
from resumeledger.core.owner_registry import OwnerRegistry
from resumeledger.core.public_resolver import PublicResolver
from resumeledger.core.service import ResumeService
from resumeledger.core.version_store import VersionStore
from resumeledger.models.owners import Owner


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path of a fresh SQLite database file."""
    return tmp_path / "resumes.db"


@pytest.fixture
def db(db_path: Path) -> Database:
    """Provide an opened Database with short transaction budgets."""
    database = Database(db_path, wait_seconds=5.0, timeout_seconds=10.0).open()
    yield database
    database.close()


@pytest.fixture
def owners(db: Database) -> OwnerRegistry:
    return OwnerRegistry(db)


@pytest.fixture
def store(db: Database) -> VersionStore:
    return VersionStore(db)


@pytest.fixture
def master(db: Database) -> MasterResolution:
    return MasterResolution(db)


@pytest.fixture
def profiles(db: Database, store: VersionStore) -> LockedProfileManager:
    return LockedProfileManager(db, store)


@pytest.fixture
def archival(db: Database) -> ArchivalGate:
    return ArchivalGate(db)


@pytest.fixture
def recorder(db: Database) -> AnalyticsRecorder:
    return AnalyticsRecorder(db)


@pytest.fixture
def resolver(
    owners: OwnerRegistry, store: VersionStore, recorder: AnalyticsRecorder
) -> PublicResolver:
    return PublicResolver(owners, store, recorder)


@pytest.fixture
def make_owner(owners: OwnerRegistry) -> Callable[..., Owner]:
    """Factory fixture: register an owner, defaulting to 'alice'."""

    def _factory(username: str = "alice") -> Owner:
        return owners.register(username)

    return _factory


@pytest.fixture
def alice(make_owner: Callable[..., Owner]) -> Owner:
    return make_owner("alice")


@pytest.fixture
def service(db_path: Path) -> ResumeService:
    """Provide a fully wired ResumeService on a temp database."""
    config = ServiceConfig(
        database_path=db_path,
        tx_wait_seconds=5.0,
        tx_timeout_seconds=10.0,
    )
    svc = ResumeService(config)
    yield svc
    svc.close()


# ---------------------------------------------------------------------------
# Sample content
# ---------------------------------------------------------------------------


@pytest.fixture
def make_content() -> Callable[..., dict[str, Any]]:
    """Factory fixture: build resume content with sensible defaults."""

    def _factory(headline: str = "Engineer", **overrides: Any) -> dict[str, Any]:
        content: dict[str, Any] = {
            "name": "Alice Example",
            "headline": headline,
            "experience": [{"company": "Initech", "years": 3}],
        }
        content.update(overrides)
        return content

    return _factory


@pytest.fixture
def c1(make_content: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    return make_content("Engineer")


@pytest.fixture
def c2(make_content: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    return make_content("Senior Engineer")
