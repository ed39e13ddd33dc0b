"""Ledger and version models (append-only, immutable content).

A ledger is the ordered collection of versions belonging to one owner's
main resume or to one of their locked profiles.  Versions are:
- Immutable (content and number never change after creation)
- Sequentially numbered per ledger, starting at 1
- Exclusively flagged: exactly one master per non-empty ledger
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LedgerKind(str, Enum):
    """Which kind of ledger a version lives in."""

    MASTER = "master"
    LOCKED = "locked"


class LedgerRef(BaseModel):
    """Addresses one ledger: an owner's main ledger or a named locked ledger."""

    model_config = ConfigDict(frozen=True)

    owner_id: str
    kind: LedgerKind = LedgerKind.MASTER
    profile_name: str | None = None

    @classmethod
    def main(cls, owner_id: str) -> LedgerRef:
        return cls(owner_id=owner_id)

    @classmethod
    def locked(cls, owner_id: str, profile_name: str) -> LedgerRef:
        return cls(owner_id=owner_id, kind=LedgerKind.LOCKED, profile_name=profile_name)

    @property
    def storage_name(self) -> str:
        """Value of the ``ledgers.name`` column for this ref."""
        return self.profile_name or ""


class VersionSummary(BaseModel):
    """Listing view of a version — everything except the content."""

    model_config = ConfigDict(frozen=True)

    version_id: str
    ledger_id: str
    version_number: int = Field(gt=0)
    content_hash: str
    is_master: bool = False
    is_archived: bool = False
    created_at: datetime


class Version(BaseModel):
    """A single immutable snapshot of resume content."""

    model_config = ConfigDict(frozen=True)

    version_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    ledger_id: str
    version_number: int = Field(gt=0)
    content: dict[str, Any]
    content_hash: str = ""
    is_master: bool = True
    is_archived: bool = False
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def summary(self) -> VersionSummary:
        """Drop the content for listing."""
        return VersionSummary(**self.model_dump(exclude={"content"}))
