"""Analytics event models — append-only view records."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from resumeledger.models.versions import LedgerKind


class DeviceType(str, Enum):
    """Normalized device classes recorded for a view."""

    DESKTOP = "Desktop"
    MOBILE = "Mobile"
    TABLET = "Tablet"


class ViewMetadata(BaseModel):
    """Opaque request metadata supplied by the caller of a public view.

    Geolocation and user-agent parsing happen outside the core; whatever
    the caller knows is passed through as-is.
    """

    model_config = ConfigDict(frozen=True)

    country: str | None = None
    city: str | None = None
    device: str | None = None
    os_name: str | None = None
    browser: str | None = None
    referrer: str | None = None
    user_agent: str | None = None
    extra: dict[str, Any] = {}


class AnalyticsEvent(BaseModel):
    """One record per successful public resolution. Duplicates are expected."""

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    username: str
    ledger_kind: LedgerKind
    profile_name: str | None = None
    version_number: int | None = None
    viewed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    country: str = "Unknown"
    city: str = "Unknown"
    device: DeviceType = DeviceType.DESKTOP
    browser: str = "Unknown"
    referrer: str = "Direct"
    user_agent: str | None = None
    extra: dict[str, Any] = {}


class AnalyticsSummary(BaseModel):
    """Headline numbers for an owner's public views."""

    model_config = ConfigDict(frozen=True)

    total_views: int = 0
    countries_count: int = 0
    desktop_views: int = 0
    mobile_views: int = 0
