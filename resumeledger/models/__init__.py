"""resumeledger data models — all Pydantic v2, all frozen (immutable)."""

from resumeledger.models.analytics import (
    AnalyticsEvent,
    AnalyticsSummary,
    DeviceType,
    ViewMetadata,
)
from resumeledger.models.owners import Owner
from resumeledger.models.profiles import LockedProfile, ProfileSummary
from resumeledger.models.public import PublicAddress, ResolvedView
from resumeledger.models.versions import LedgerKind, LedgerRef, Version, VersionSummary

__all__ = [
    # owners
    "Owner",
    # versions
    "LedgerKind",
    "LedgerRef",
    "Version",
    "VersionSummary",
    # profiles
    "LockedProfile",
    "ProfileSummary",
    # public
    "PublicAddress",
    "ResolvedView",
    # analytics
    "AnalyticsEvent",
    "AnalyticsSummary",
    "DeviceType",
    "ViewMetadata",
]
