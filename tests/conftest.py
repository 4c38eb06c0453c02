"""
Shared test fixtures for the SmartFarm backend test suite.

Provides:
- An in-memory stand-in for the PostgREST backend
- The "Tomato" reference profile and a reading factory
- Recording collaborators for the monitoring loop
- A Flask app + test client wired to the in-memory backend

Usage:
    def test_example(fake_backend, tomato_profile):
        fake_backend.tables["Vegetationtbl"].append(tomato_profile.to_row())
"""

from __future__ import annotations

import itertools
import logging
from collections import defaultdict
from typing import Any
from unittest.mock import MagicMock

import pytest

from app.domain.exceptions import FetchError
from app.domain.sensors.reading import SensorReading
from app.domain.vegetation_profile import VegetationProfile
from app.utils.result import Result

# ---------------------------------------------------------------------------
# Logging - keep test output clean
# ---------------------------------------------------------------------------
logging.getLogger("infrastructure").setLevel(logging.WARNING)
logging.getLogger("app").setLevel(logging.WARNING)


# ========================== Backend Fakes ==================================


class FakePostgREST:
    """Dict-of-lists backend understanding the query subset the repositories use.

    Supports ``eq.`` filters, ``order=<col>.<asc|desc>`` and ``limit``.
    Set ``fail_with`` to make every call raise.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.calls: list[tuple[str, str, Any]] = []
        self.fail_with: Exception | None = None
        self._ids = itertools.count(1)

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    @staticmethod
    def _matches(row: dict[str, Any], filters: dict[str, str]) -> bool:
        return all(str(row.get(column)) == value for column, value in filters.items())

    @staticmethod
    def _filters(params: dict[str, str]) -> dict[str, str]:
        return {k: v[3:] for k, v in params.items() if isinstance(v, str) and v.startswith("eq.")}

    def select(self, table: str, params: dict[str, str] | None = None) -> list[dict[str, Any]]:
        params = dict(params or {})
        self.calls.append(("select", table, params))
        self._check()
        rows = [dict(r) for r in self.tables[table] if self._matches(r, self._filters(params))]
        if "order" in params:
            column, _, direction = params["order"].partition(".")
            rows.sort(key=lambda r: str(r.get(column) or ""), reverse=direction == "desc")
        if "limit" in params:
            rows = rows[: int(params["limit"])]
        return rows

    def insert(self, table: str, row: dict[str, Any]) -> None:
        self.calls.append(("insert", table, dict(row)))
        self._check()
        stored = dict(row)
        stored.setdefault("id", next(self._ids))
        self.tables[table].append(stored)

    def update(self, table: str, filters: dict[str, str], values: dict[str, Any]) -> None:
        self.calls.append(("update", table, dict(values)))
        self._check()
        wanted = self._filters(filters)
        for row in self.tables[table]:
            if self._matches(row, wanted):
                row.update(values)

    def close(self) -> None:
        pass


@pytest.fixture()
def fake_backend():
    """Fresh in-memory backend per test."""
    return FakePostgREST()


# ========================== Domain Fixtures ================================


def make_profile(name: str = "Tomato", **overrides: Any) -> VegetationProfile:
    """Tomato reference profile; night bounds mirror the day bounds."""
    values: dict[str, Any] = {
        "day_temp_min": 18,
        "day_temp_max": 30,
        "night_temp_min": 18,
        "night_temp_max": 30,
        "day_ground_humid_min": 40,
        "day_ground_humid_max": 70,
        "night_ground_humid_min": 40,
        "night_ground_humid_max": 70,
        "day_air_humid_min": 50,
        "day_air_humid_max": 80,
        "night_air_humid_min": 50,
        "night_air_humid_max": 80,
    }
    values.update(overrides)
    return VegetationProfile(name=name, **values)


def make_reading(
    temperature: float = 24.0,
    ground_humidity: float = 55.0,
    air_humidity: float = 60.0,
    timestamp: str = "2024-06-01T14:00:00",
    **extra: Any,
) -> SensorReading:
    return SensorReading(
        temperature=temperature,
        ground_humidity=ground_humidity,
        air_humidity=air_humidity,
        timestamp=timestamp,
        **extra,
    )


def farm_row(temp=24.0, ground=55.0, air=60.0, date_time="2024-06-01T14:00:00", **extra) -> dict[str, Any]:
    """A ``Farm`` table row as the backend returns it."""
    row = {"temp": temp, "groundHumid": ground, "airHumid": air, "dateTime": date_time, "UserID": 1}
    row.update(extra)
    return row


@pytest.fixture()
def tomato_profile():
    return make_profile()


# ========================== Monitoring Collaborators =======================


class StubReadingSource:
    """Returns queued results; repeats the last one when the queue runs dry."""

    def __init__(self, *results: Result) -> None:
        self.results = list(results)
        self.calls = 0

    def push(self, result: Result) -> None:
        self.results.append(result)

    def fetch_latest_reading(self) -> Result:
        self.calls += 1
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0] if self.results else Result.ok(None)


class StubProfileStore:
    def __init__(self, profile: VegetationProfile | None = None) -> None:
        self.profile = profile

    def get_active_profile(self) -> VegetationProfile | None:
        return self.profile


class RecordingAlertSink:
    def __init__(self) -> None:
        self.alerts: list[tuple[str, str, str]] = []
        self.failures: list[str] = []

    def emit_alert(self, title: str, body: str, profile_name: str) -> None:
        self.alerts.append((title, body, profile_name))

    def report_fetch_failure(self, message: str) -> None:
        self.failures.append(message)


class RecordingRefreshSink:
    def __init__(self) -> None:
        self.count = 0

    def signal_data_refreshed(self) -> None:
        self.count += 1


def fetch_error(message: str = "connection refused") -> Result:
    return Result.fail(FetchError(message))


@pytest.fixture()
def alert_sink():
    return RecordingAlertSink()


@pytest.fixture()
def refresh_sink():
    return RecordingRefreshSink()


# ========================== Mock Service Fixtures ==========================


@pytest.fixture()
def mock_event_bus():
    """Mock EventBus that records publish calls."""
    bus = MagicMock()
    bus.publish = MagicMock()
    bus.subscribe = MagicMock()
    return bus


# ========================== Flask Fixtures =================================


@pytest.fixture()
def app(tmp_path, monkeypatch, fake_backend):
    """Flask app whose container talks to ``fake_backend``; polling thread not started."""
    monkeypatch.setenv("SMARTFARM_SECRET_KEY", "test-secret")
    monkeypatch.setattr("app.services.container.PostgRESTHandler", lambda *args, **kwargs: fake_backend)

    from app import create_app

    flask_app = create_app(
        {
            "supabase_url": "http://backend.test",
            "supabase_key": "test-key",
            "user_id": 1,
            "log_path": str(tmp_path / "smartfarm.log"),
        }
    )
    flask_app.config["TESTING"] = True
    yield flask_app
    flask_app.config["CONTAINER"].shutdown()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def container(app):
    return app.config["CONTAINER"]
