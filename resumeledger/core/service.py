"""Resume service — the single entry point for authenticated callers.

Wires one Database into the OwnerRegistry, VersionStore, MasterResolution,
LockedProfileManager, ArchivalGate, PublicResolver, AnalyticsRecorder and
RendererRegistry.  Owner identity is supplied by the caller (the auth
collaborator) and trusted as-is.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from resumeledger.analytics.recorder import AnalyticsRecorder
from resumeledger.config import ServiceConfig
from resumeledger.core.archival_gate import ArchivalGate
from resumeledger.core.database import Database
from resumeledger.core.locked_profiles import LockedProfileManager
from resumeledger.core.master_resolution import MasterResolution
from resumeledger.core.owner_registry import OwnerRegistry
from resumeledger.core.production_guard import enforce_production_constraints
from resumeledger.core.public_resolver import PublicResolver
from resumeledger.core.version_store import VersionStore
from resumeledger.models.analytics import AnalyticsSummary, ViewMetadata
from resumeledger.models.owners import Owner
from resumeledger.models.profiles import LockedProfile, ProfileSummary
from resumeledger.models.public import ResolvedView
from resumeledger.models.versions import LedgerRef, Version, VersionSummary
from resumeledger.rendering.renderers import RendererRegistry


class ResumeService:
    """Central coordinator for resume ledgers.

    Parameters
    ----------
    config:
        Service configuration. Uses ``ServiceConfig()`` if not provided.
    database_path:
        Overrides ``config.database_path``.
    """

    def __init__(
        self,
        config: ServiceConfig | None = None,
        *,
        database_path: Path | None = None,
    ) -> None:
        self.config = config or ServiceConfig()
        enforce_production_constraints(self.config)

        self.db = Database(
            database_path or self.config.database_path,
            wait_seconds=self.config.tx_wait_seconds,
            timeout_seconds=self.config.tx_timeout_seconds,
            max_retries=self.config.tx_max_retries,
        ).open()

        self.owners = OwnerRegistry(self.db)
        self.store = VersionStore(self.db)
        self.master = MasterResolution(self.db)
        self.profiles = LockedProfileManager(self.db, self.store)
        self.archival = ArchivalGate(self.db)
        self.analytics = AnalyticsRecorder(
            self.db,
            enabled=self.config.analytics_enabled,
            background=self.config.analytics_background,
            workers=self.config.analytics_workers,
            wait_seconds=self.config.analytics_wait_seconds,
        )
        self.resolver = PublicResolver(self.owners, self.store, self.analytics)
        self.renderers = RendererRegistry(self.config.default_template)

    def close(self) -> None:
        """Drain analytics and release the storage resource."""
        self.analytics.flush()
        self.db.close()

    def __enter__(self) -> ResumeService:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Owners
    # ------------------------------------------------------------------

    def register_owner(self, username: str) -> Owner:
        return self.owners.register(username)

    def owner_by_username(self, username: str) -> Owner:
        return self.owners.get_by_username(username)

    # ------------------------------------------------------------------
    # Main ledger
    # ------------------------------------------------------------------

    def create_version(self, owner_id: str, content: dict[str, Any]) -> VersionSummary:
        """Publish new content as the owner's live resume."""
        return self.store.create_version(LedgerRef.main(owner_id), content).summary()

    def list_versions(
        self, owner_id: str, *, include_archived: bool = False
    ) -> list[VersionSummary]:
        return self.store.list_versions(
            LedgerRef.main(owner_id), include_archived=include_archived
        )

    def get_master(self, owner_id: str) -> Version:
        return self.store.get_master(LedgerRef.main(owner_id))

    def archive_version(self, owner_id: str, version_id: str) -> VersionSummary:
        return self.archival.archive(owner_id, version_id)

    def unarchive_version(self, owner_id: str, version_id: str) -> VersionSummary:
        return self.archival.unarchive(owner_id, version_id)

    def set_live(self, owner_id: str, version_id: str) -> Version:
        """Restore a past version of any of the owner's ledgers."""
        _, ledger = self.store.find_version(version_id)
        if ledger.owner_id != owner_id:
            ledger = LedgerRef.main(owner_id)
        return self.master.set_live(ledger, version_id)

    # ------------------------------------------------------------------
    # Locked profiles
    # ------------------------------------------------------------------

    def create_locked_profile(
        self, owner_id: str, name: str
    ) -> tuple[LockedProfile, Version]:
        return self.profiles.create_profile(owner_id, name)

    def refresh_locked_profile(self, owner_id: str, name: str) -> Version:
        return self.profiles.refresh_profile(owner_id, name)

    def list_locked_profiles(self, owner_id: str) -> list[ProfileSummary]:
        return self.profiles.list_profiles(owner_id)

    def list_profile_versions(
        self, owner_id: str, name: str, *, include_archived: bool = False
    ) -> list[VersionSummary]:
        return self.profiles.list_profile_versions(
            owner_id, name, include_archived=include_archived
        )

    # ------------------------------------------------------------------
    # Public reads and exports
    # ------------------------------------------------------------------

    def view(self, path: str, metadata: ViewMetadata | None = None) -> ResolvedView:
        """Resolve a public path (unauthenticated)."""
        return self.resolver.resolve_path(path, metadata)

    def export_master(
        self,
        owner_id: str,
        template: str | None = None,
        content: dict[str, Any] | None = None,
    ) -> bytes:
        """Render unsaved ``content`` or, if omitted, the owner's live resume."""
        data = content if content else self.get_master(owner_id).content
        return self.renderers.get(template).render(data)

    def export_locked(self, owner_id: str, name: str, template: str | None = None) -> bytes:
        """Render the live version of a locked profile."""
        version = self.store.get_master(LedgerRef.locked(owner_id, name))
        return self.renderers.get(template).render(version.content)

    def analytics_summary(self, owner_id: str) -> AnalyticsSummary:
        owner = self.owners.get(owner_id)
        return self.analytics.summarize(owner.username)

    def verify(self, owner_id: str) -> bool:
        """Audit the owner's main ledger and every locked ledger."""
        self.store.verify_ledger(LedgerRef.main(owner_id))
        for profile in self.profiles.list_profiles(owner_id):
            self.store.verify_ledger(LedgerRef.locked(owner_id, profile.name))
        return True
