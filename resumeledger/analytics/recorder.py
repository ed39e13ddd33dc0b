"""Analytics recorder — append-only, best-effort view tracking.

Writes are outside the core's consistency domain:
- one short transaction per event, never shared with a version write
- a single attempt with a sub-second lock wait; a busy database drops the event
- failures are logged and dropped, never raised to the viewer
- optionally dispatched to a small thread pool so views never wait on them
"""

from __future__ import annotations

import json
import logging
import sqlite3
from concurrent.futures import ThreadPoolExecutor

from resumeledger.analytics.devices import normalize_device
from resumeledger.core.database import Database
from resumeledger.models.analytics import (
    AnalyticsEvent,
    AnalyticsSummary,
    DeviceType,
    ViewMetadata,
)
from resumeledger.models.public import PublicAddress

logger = logging.getLogger(__name__)


def build_event(address: PublicAddress, metadata: ViewMetadata | None = None) -> AnalyticsEvent:
    """Turn a resolved address plus caller metadata into an event record."""
    meta = metadata or ViewMetadata()
    return AnalyticsEvent(
        username=address.username,
        ledger_kind=address.kind,
        profile_name=address.profile_name,
        version_number=address.version_number,
        country=meta.country or "Unknown",
        city=meta.city or "Unknown",
        device=normalize_device(meta.device, meta.os_name),
        browser=meta.browser or "Unknown",
        referrer=meta.referrer or "Direct",
        user_agent=meta.user_agent,
        extra=dict(meta.extra),
    )


class AnalyticsRecorder:
    """Persists view events without ever failing the view.

    Parameters
    ----------
    db:
        The shared storage resource.
    enabled:
        When False, ``record_view`` is a no-op.
    background:
        Dispatch writes to a thread pool instead of writing inline.
    workers:
        Thread pool size when ``background`` is set.
    wait_seconds:
        How long one event may queue for the write lock before it is
        dropped. Events are never retried.
    """

    def __init__(
        self,
        db: Database,
        *,
        enabled: bool = True,
        background: bool = False,
        workers: int = 2,
        wait_seconds: float = 0.25,
    ) -> None:
        self._db = db
        self.enabled = enabled
        self.wait_seconds = wait_seconds
        self._executor: ThreadPoolExecutor | None = None
        if background:
            self._executor = ThreadPoolExecutor(
                max_workers=max(1, workers), thread_name_prefix="analytics"
            )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def record_view(
        self, address: PublicAddress, metadata: ViewMetadata | None = None
    ) -> None:
        """Record one view. Never raises."""
        if not self.enabled:
            return
        try:
            event = build_event(address, metadata)
            if self._executor is not None:
                self._executor.submit(self._write_safely, event)
            else:
                self._write_safely(event)
        except Exception as exc:  # noqa: BLE001
            logger.error("Analytics event for %s dropped: %s", address.to_path(), exc)

    def _write_safely(self, event: AnalyticsEvent) -> None:
        try:
            self.write(event)
        except Exception as exc:  # noqa: BLE001
            logger.error("Analytics event %s dropped: %s", event.event_id, exc)

    def write(self, event: AnalyticsEvent) -> AnalyticsEvent:
        """Insert one event in a single short attempt. Raises on storage failure."""

        def _work(conn: sqlite3.Connection) -> AnalyticsEvent:
            conn.execute(
                """
                INSERT INTO analytics_events
                    (event_id, username, ledger_kind, profile_name, version_number,
                     viewed_at, country, city, device, browser, referrer,
                     user_agent, extra_json)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    event.event_id,
                    event.username,
                    event.ledger_kind.value,
                    event.profile_name,
                    event.version_number,
                    event.viewed_at.isoformat(),
                    event.country,
                    event.city,
                    event.device.value,
                    event.browser,
                    event.referrer,
                    event.user_agent,
                    json.dumps(event.extra, sort_keys=True),
                ),
            )
            return event

        return self._db.run_transaction(
            _work, max_retries=0, wait_seconds=self.wait_seconds
        )

    def flush(self) -> None:
        """Wait for queued background writes and stop the pool."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def recent_events(self, username: str, limit: int = 10) -> list[AnalyticsEvent]:
        """Most recent views of an owner's resumes, newest first."""
        with self._db.read() as conn:
            rows = conn.execute(
                "SELECT * FROM analytics_events WHERE username = ? "
                "ORDER BY viewed_at DESC, id DESC LIMIT ?",
                (username, limit),
            ).fetchall()
        return [self._row_to_event(row) for row in rows]

    def summarize(self, username: str) -> AnalyticsSummary:
        """Total views, distinct countries and desktop vs mobile split."""
        with self._db.read() as conn:
            totals = conn.execute(
                "SELECT COUNT(*), COUNT(DISTINCT country) FROM analytics_events "
                "WHERE username = ?",
                (username,),
            ).fetchone()
            devices = conn.execute(
                "SELECT device, COUNT(*) AS views FROM analytics_events "
                "WHERE username = ? GROUP BY device",
                (username,),
            ).fetchall()

        by_device = {row["device"]: row["views"] for row in devices}
        return AnalyticsSummary(
            total_views=totals[0],
            countries_count=totals[1],
            desktop_views=by_device.get(DeviceType.DESKTOP.value, 0),
            mobile_views=by_device.get(DeviceType.MOBILE.value, 0)
            + by_device.get(DeviceType.TABLET.value, 0),
        )

    @staticmethod
    def _row_to_event(row: sqlite3.Row) -> AnalyticsEvent:
        return AnalyticsEvent(
            event_id=row["event_id"],
            username=row["username"],
            ledger_kind=row["ledger_kind"],
            profile_name=row["profile_name"],
            version_number=row["version_number"],
            viewed_at=row["viewed_at"],
            country=row["country"],
            city=row["city"],
            device=normalize_device(row["device"]),
            browser=row["browser"],
            referrer=row["referrer"],
            user_agent=row["user_agent"],
            extra=json.loads(row["extra_json"]),
        )
