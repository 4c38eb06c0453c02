from datetime import datetime, timedelta, timezone

from app.utils.time import iso_now, iso_or_none, utc_now


def test_utc_now_is_timezone_aware():
    now = utc_now()
    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)


def test_iso_now_carries_offset():
    stamp = iso_now()
    assert stamp.endswith("+00:00")
    assert datetime.fromisoformat(stamp).utcoffset() == timedelta(0)


def test_iso_now_timespec():
    assert len(iso_now(timespec="seconds")) == len("2026-01-01T00:00:00+00:00")


def test_iso_or_none():
    assert iso_or_none(None) is None
    assert iso_or_none(datetime(2024, 6, 1, 14, 0, tzinfo=timezone.utc)) == "2024-06-01T14:00:00+00:00"
