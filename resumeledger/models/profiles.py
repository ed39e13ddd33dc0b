"""Locked profile models — named forks of the master ledger."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from resumeledger.models.versions import VersionSummary


class LockedProfile(BaseModel):
    """A named, independently versioned ledger seeded from the master.

    Content is copied by value at fork and refresh time; edits to the
    master ledger never reach an existing locked version.
    """

    model_config = ConfigDict(frozen=True)

    ledger_id: str
    owner_id: str
    name: str
    created_at: datetime


class ProfileSummary(BaseModel):
    """A locked profile with its latest version, for listings."""

    model_config = ConfigDict(frozen=True)

    name: str
    created_at: datetime
    latest_version: VersionSummary | None = None
