"""Device normalization for view records.

Raw device strings come from whatever user-agent parser the caller uses.
Missing devices default to Desktop; a known mobile OS without a device
type counts as Mobile.
"""

from __future__ import annotations

from resumeledger.models.analytics import DeviceType

_MOBILE_OS = {"ios", "android"}


def normalize_device(raw_device: str | None, os_name: str | None = None) -> DeviceType:
    """Collapse a raw device label to Desktop, Mobile or Tablet."""
    value = (raw_device or "").strip().lower()
    if not value:
        if os_name and os_name.strip().lower() in _MOBILE_OS:
            return DeviceType.MOBILE
        return DeviceType.DESKTOP
    if value == "tablet":
        return DeviceType.TABLET
    if value in ("mobile", "phone", "wearable"):
        return DeviceType.MOBILE
    return DeviceType.DESKTOP
