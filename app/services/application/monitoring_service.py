# app/services/application/monitoring_service.py
"""
Farm Monitoring Service
=======================
Periodically fetches the latest farm reading, evaluates it against the active
vegetation profile and raises at most one alert per distinct reading timestamp.

Features:
- Single daemon worker thread driven by a stop event
- Overlapping ticks are dropped, never queued
- Failed fetches leave the dedup state untouched; the next tick is the retry
- Data-refresh and alert notifications are independent events
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.domain.alert_state import AlertState
from app.domain.photoperiod import DEFAULT_PHOTOPERIOD, Photoperiod
from app.domain.range_evaluator import ALERT_TITLE, EMPTY_REPORT, DeviationReport, evaluate, format_alert_body
from app.domain.sensors.reading import SensorReading
from app.utils.concurrency import synchronized
from app.utils.time import iso_or_none, utc_now

if TYPE_CHECKING:
    from app.services.protocols import AlertSink, ProfileStore, ReadingSource, RefreshSink

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_S = 10.0
FETCH_FAILURE_MESSAGE = "Could not reach the farm backend; retrying on the next refresh."


@dataclass(frozen=True)
class TickOutcome:
    """What a single poll tick did."""

    skipped: bool = False
    fetched: bool = False
    reading: SensorReading | None = None
    report: DeviationReport = EMPTY_REPORT
    alerted: bool = False
    error: Exception | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "skipped": self.skipped,
            "fetched": self.fetched,
            "reading": self.reading.to_dict() if self.reading else None,
            "report": self.report.to_dict(),
            "alerted": self.alerted,
            "error": str(self.error) if self.error else None,
        }


class FarmMonitoringService:
    """
    Polls the reading source on a fixed interval and drives the alert state.

    State is only mutated inside ``poll_once``; ticks are serialized by
    ``_tick_lock`` and readers go through ``_lock``.
    """

    def __init__(
        self,
        reading_source: "ReadingSource",
        profile_store: "ProfileStore",
        alert_sink: "AlertSink",
        refresh_sink: "RefreshSink",
        poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
        photoperiod: Photoperiod = DEFAULT_PHOTOPERIOD,
    ):
        self.reading_source = reading_source
        self.profile_store = profile_store
        self.alert_sink = alert_sink
        self.refresh_sink = refresh_sink
        self.poll_interval_s = max(0.1, float(poll_interval_s))
        self.photoperiod = photoperiod

        self._state = AlertState()
        self._latest_reading: SensorReading | None = None
        self._latest_report: DeviationReport = EMPTY_REPORT

        # Counters
        self._tick_count = 0
        self._alert_count = 0
        self._failure_count = 0
        self._failure_streak = 0
        self._last_error: str | None = None
        self._last_tick_at: datetime | None = None

        # Concurrency control
        self._lock = threading.RLock()
        self._tick_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._worker_thread: threading.Thread | None = None

        logger.info("FarmMonitoringService initialized (interval=%.1fs)", self.poll_interval_s)

    # -------------------------------------------------------------------------
    # Lifecycle Management
    # -------------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        thread = self._worker_thread
        return thread is not None and thread.is_alive()

    def start(self) -> bool:
        """Start the polling thread. Returns False if it was already running."""
        with self._lock:
            if self.is_running:
                return False
            # One event per worker: a thread that outlived stop() keeps its own set event
            self._stop_event = threading.Event()
            self._worker_thread = threading.Thread(
                target=self._polling_loop, args=(self._stop_event,), name="FarmMonitor", daemon=True
            )
            self._worker_thread.start()
        logger.info("Started farm monitoring every %.1fs", self.poll_interval_s)
        return True

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the polling thread. Safe to call more than once."""
        with self._lock:
            thread = self._worker_thread
            self._worker_thread = None
            self._stop_event.set()

        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning("Farm monitoring thread did not stop within %.1fs", timeout)
        logger.info("Farm monitoring stopped")

    def _polling_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            t_start = time.perf_counter()
            try:
                self.poll_once()
            except Exception as exc:
                logger.exception("Farm monitoring tick failed: %s", exc)

            elapsed = time.perf_counter() - t_start
            stop_event.wait(max(0.0, self.poll_interval_s - elapsed))

    # -------------------------------------------------------------------------
    # Core Logic
    # -------------------------------------------------------------------------

    def poll_once(self) -> TickOutcome:
        """Run one fetch-then-evaluate tick, or skip it if one is in flight."""
        if not self._tick_lock.acquire(blocking=False):
            logger.debug("Previous monitoring tick still running; skipping")
            return TickOutcome(skipped=True)
        try:
            return self._tick()
        finally:
            self._tick_lock.release()

    def _tick(self) -> TickOutcome:
        result = self.reading_source.fetch_latest_reading()
        with self._lock:
            self._tick_count += 1
            self._last_tick_at = utc_now()

        if not result.is_ok:
            self._handle_fetch_failure(result.error)
            return TickOutcome(error=result.error)

        with self._lock:
            if self._failure_streak:
                logger.info("Farm backend reachable again after %d failed fetches", self._failure_streak)
            self._failure_streak = 0
            self._last_error = None

        reading = result.value
        report = EMPTY_REPORT
        alerted = False
        if reading is not None:
            profile = self.profile_store.get_active_profile()
            report = evaluate(reading, profile, self.photoperiod)
            with self._lock:
                if self._state.observe(reading.timestamp):
                    logger.debug("New reading at %s", reading.timestamp)
                self._latest_reading = reading
                self._latest_report = report
                should_alert = self._state.should_alert(bool(report))

            if should_alert and profile is not None:
                body = format_alert_body(report)
                self.alert_sink.emit_alert(ALERT_TITLE, body, profile.name)
                with self._lock:
                    self._state.mark_notified()
                    self._alert_count += 1
                alerted = True
                logger.info("Alert raised for %s at %s: %s", profile.name, reading.timestamp, body.strip())

        self.refresh_sink.signal_data_refreshed()
        return TickOutcome(fetched=True, reading=reading, report=report, alerted=alerted)

    def _handle_fetch_failure(self, error: Exception | None) -> None:
        with self._lock:
            self._failure_count += 1
            self._failure_streak += 1
            self._last_error = str(error) if error else "unknown error"
            first_of_streak = self._failure_streak == 1

        if first_of_streak:
            logger.warning("Failed to fetch latest reading: %s", error)
            self.alert_sink.report_fetch_failure(FETCH_FAILURE_MESSAGE)
        else:
            logger.debug("Fetch still failing (%d in a row): %s", self._failure_streak, error)

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    @synchronized
    def get_status(self) -> dict[str, Any]:
        """Returns loop status for API/Dashboards."""
        return {
            "is_running": self.is_running,
            "poll_interval": self.poll_interval_s,
            **self._state.to_dict(),
            "tick_count": self._tick_count,
            "alert_count": self._alert_count,
            "failure_count": self._failure_count,
            "failure_streak": self._failure_streak,
            "last_error": self._last_error,
            "last_tick_at": iso_or_none(self._last_tick_at),
        }

    @synchronized
    def latest_snapshot(self) -> tuple[SensorReading | None, DeviationReport]:
        """The last fetched reading with its deviation report."""
        return self._latest_reading, self._latest_report


__all__ = ["FarmMonitoringService", "TickOutcome", "DEFAULT_POLL_INTERVAL_S", "FETCH_FAILURE_MESSAGE"]
