"""Analytics collaborator — best-effort view records and their summary."""

from resumeledger.analytics.devices import normalize_device
from resumeledger.analytics.recorder import AnalyticsRecorder, build_event

__all__ = ["AnalyticsRecorder", "build_event", "normalize_device"]
