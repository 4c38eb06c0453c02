import threading
import time
from unittest.mock import MagicMock

import pytest

from app.domain.range_evaluator import ALERT_TITLE
from app.services.application.monitoring_service import FETCH_FAILURE_MESSAGE, FarmMonitoringService
from app.utils.result import Result
from conftest import StubProfileStore, StubReadingSource, fetch_error, make_profile, make_reading

HOT = make_reading(temperature=33.0, timestamp="2024-06-01T14:00:00")
HOT_LATER = make_reading(temperature=34.0, timestamp="2024-06-01T14:00:10")
FINE = make_reading(temperature=24.0, timestamp="2024-06-01T14:00:20")


def _service(source, alert_sink, refresh_sink, profile=None, **kwargs):
    store = StubProfileStore(profile if profile is not None else make_profile())
    return FarmMonitoringService(source, store, alert_sink, refresh_sink, **kwargs)


def _wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


# ---------------------------------------------------------------------------
# Dedup
# ---------------------------------------------------------------------------


def test_same_timestamp_alerts_once(alert_sink, refresh_sink):
    service = _service(StubReadingSource(Result.ok(HOT)), alert_sink, refresh_sink)

    first = service.poll_once()
    second = service.poll_once()

    assert first.alerted is True
    assert second.alerted is False
    assert alert_sink.alerts == [(ALERT_TITLE, "Temperature is too high by 3.0°C. ", "Tomato")]
    assert refresh_sink.count == 2


def test_new_timestamp_alerts_again(alert_sink, refresh_sink):
    service = _service(StubReadingSource(Result.ok(HOT), Result.ok(HOT_LATER)), alert_sink, refresh_sink)

    service.poll_once()
    service.poll_once()

    assert [body for _, body, _ in alert_sink.alerts] == [
        "Temperature is too high by 3.0°C. ",
        "Temperature is too high by 4.0°C. ",
    ]
    assert service.get_status()["last_seen_timestamp"] == HOT_LATER.timestamp


def test_in_range_reading_refreshes_without_alert(alert_sink, refresh_sink):
    service = _service(StubReadingSource(Result.ok(FINE)), alert_sink, refresh_sink)

    outcome = service.poll_once()

    assert outcome.fetched and not outcome.alerted
    assert outcome.report.in_range
    assert refresh_sink.count == 1
    assert alert_sink.alerts == []


def test_no_active_profile_suppresses_alerts(alert_sink, refresh_sink):
    source = StubReadingSource(Result.ok(HOT))
    service = FarmMonitoringService(source, StubProfileStore(None), alert_sink, refresh_sink)

    service.poll_once()

    assert alert_sink.alerts == []
    assert refresh_sink.count == 1


def test_profile_activated_later_alerts_for_current_reading(alert_sink, refresh_sink):
    store = StubProfileStore(None)
    service = FarmMonitoringService(StubReadingSource(Result.ok(HOT)), store, alert_sink, refresh_sink)

    service.poll_once()
    store.profile = make_profile(name="Pepper")
    service.poll_once()

    assert [name for _, _, name in alert_sink.alerts] == ["Pepper"]


def test_empty_table_skips_evaluation(alert_sink, refresh_sink):
    store = MagicMock()
    service = FarmMonitoringService(StubReadingSource(Result.ok(None)), store, alert_sink, refresh_sink)

    outcome = service.poll_once()

    assert outcome.fetched is True
    assert outcome.reading is None
    store.get_active_profile.assert_not_called()
    assert refresh_sink.count == 1
    assert service.latest_snapshot()[0] is None


# ---------------------------------------------------------------------------
# Fetch failures
# ---------------------------------------------------------------------------


def test_failed_fetch_changes_nothing(alert_sink, refresh_sink):
    source = StubReadingSource(Result.ok(HOT), fetch_error(), Result.ok(HOT))
    service = _service(source, alert_sink, refresh_sink)

    service.poll_once()
    failed = service.poll_once()
    service.poll_once()

    assert failed.error is not None and not failed.fetched
    assert len(alert_sink.alerts) == 1
    assert refresh_sink.count == 2
    status = service.get_status()
    assert status["last_seen_timestamp"] == HOT.timestamp
    assert status["notified"] is True
    assert status["failure_count"] == 1
    assert status["failure_streak"] == 0
    assert status["last_error"] is None


def test_failure_reported_once_per_streak(alert_sink, refresh_sink):
    source = StubReadingSource(fetch_error(), fetch_error(), fetch_error(), Result.ok(FINE), fetch_error())
    service = _service(source, alert_sink, refresh_sink)

    for _ in range(3):
        service.poll_once()
    assert alert_sink.failures == [FETCH_FAILURE_MESSAGE]
    assert service.get_status()["failure_streak"] == 3

    service.poll_once()
    service.poll_once()
    assert len(alert_sink.failures) == 2
    assert service.get_status()["last_error"] == "connection refused"


def test_loop_continues_after_failure(alert_sink, refresh_sink):
    source = StubReadingSource(fetch_error(), Result.ok(HOT))
    service = _service(source, alert_sink, refresh_sink)

    service.poll_once()
    outcome = service.poll_once()

    assert outcome.alerted is True


# ---------------------------------------------------------------------------
# Concurrency & lifecycle
# ---------------------------------------------------------------------------


class BlockingSource:
    def __init__(self):
        self.entered = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def fetch_latest_reading(self):
        self.calls += 1
        self.entered.set()
        self.release.wait(timeout=2.0)
        return Result.ok(FINE)


def test_overlapping_tick_is_skipped(alert_sink, refresh_sink):
    source = BlockingSource()
    service = _service(source, alert_sink, refresh_sink)
    worker = threading.Thread(target=service.poll_once)
    worker.start()
    assert source.entered.wait(timeout=2.0)

    skipped = service.poll_once()
    source.release.set()
    worker.join(timeout=2.0)

    assert skipped.skipped is True
    assert source.calls == 1
    assert refresh_sink.count == 1


def test_start_and_stop(alert_sink, refresh_sink):
    source = StubReadingSource(Result.ok(FINE))
    service = _service(source, alert_sink, refresh_sink, poll_interval_s=0.1)

    assert service.start() is True
    assert service.start() is False
    assert _wait_for(lambda: source.calls >= 2)

    service.stop()
    assert service.is_running is False
    calls_after_stop = source.calls
    time.sleep(0.25)
    assert source.calls == calls_after_stop

    service.stop()  # idempotent


def test_restart_after_stop(alert_sink, refresh_sink):
    source = StubReadingSource(Result.ok(FINE))
    service = _service(source, alert_sink, refresh_sink, poll_interval_s=0.1)

    service.start()
    service.stop()
    assert service.start() is True
    assert service.get_status()["is_running"] is True
    service.stop()


def test_restart_after_timed_out_stop_runs_one_loop(alert_sink, refresh_sink):
    source = BlockingSource()
    service = _service(source, alert_sink, refresh_sink, poll_interval_s=0.1)

    service.start()
    assert source.entered.wait(timeout=2.0)
    old_worker = service._worker_thread
    service.stop(timeout=0.05)
    assert old_worker.is_alive()

    service.start()
    source.release.set()
    old_worker.join(timeout=2.0)

    try:
        assert not old_worker.is_alive()
        assert service.is_running
        monitors = [t for t in threading.enumerate() if t.name == "FarmMonitor" and t.is_alive()]
        assert monitors == [service._worker_thread]
    finally:
        service.stop()


def test_loop_survives_collaborator_exceptions(alert_sink, refresh_sink):
    source = MagicMock()
    source.fetch_latest_reading.side_effect = [RuntimeError("boom"), Result.ok(FINE), Result.ok(FINE)] + [
        Result.ok(FINE)
    ] * 50
    service = _service(source, alert_sink, refresh_sink, poll_interval_s=0.1)

    service.start()
    try:
        assert _wait_for(lambda: refresh_sink.count >= 1)
    finally:
        service.stop()


def test_status_and_snapshot(alert_sink, refresh_sink):
    service = _service(StubReadingSource(Result.ok(HOT)), alert_sink, refresh_sink, poll_interval_s=10)

    service.poll_once()
    status = service.get_status()
    reading, report = service.latest_snapshot()

    assert status["is_running"] is False
    assert status["poll_interval"] == 10.0
    assert status["tick_count"] == 1
    assert status["alert_count"] == 1
    assert status["last_tick_at"] is not None
    assert reading == HOT
    assert len(report) == 1


@pytest.mark.parametrize("interval", [0, -5])
def test_interval_has_floor(alert_sink, refresh_sink, interval):
    service = _service(StubReadingSource(), alert_sink, refresh_sink, poll_interval_s=interval)
    assert service.poll_interval_s == pytest.approx(0.1)
