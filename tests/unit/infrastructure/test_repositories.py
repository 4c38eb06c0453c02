import pytest

from app.domain.exceptions import FetchError, MalformedRowError
from conftest import farm_row, make_profile
from infrastructure.database.repositories import HistoryRepository, ReadingRepository, VegetationRepository


def test_latest_reading_is_newest_by_date(fake_backend):
    fake_backend.tables["Farm"].extend(
        [
            farm_row(temp=20, date_time="2024-06-01T10:00:00"),
            farm_row(temp=22, date_time="2024-06-01T12:00:00"),
            farm_row(temp=21, date_time="2024-06-01T11:00:00"),
        ]
    )

    reading = ReadingRepository(fake_backend).get_latest()

    assert reading.temperature == 22
    assert reading.timestamp == "2024-06-01T12:00:00"


def test_latest_reading_filtered_by_user(fake_backend):
    fake_backend.tables["Farm"].extend(
        [
            farm_row(temp=20, date_time="2024-06-01T10:00:00", UserID=1),
            farm_row(temp=30, date_time="2024-06-01T12:00:00", UserID=2),
        ]
    )

    reading = ReadingRepository(fake_backend, user_id=1).get_latest()

    assert reading.temperature == 20
    _, _, params = fake_backend.calls[-1]
    assert params["UserID"] == "eq.1"


def test_empty_farm_table_returns_none(fake_backend):
    assert ReadingRepository(fake_backend).get_latest() is None


def test_malformed_reading_row_is_fetch_error(fake_backend):
    fake_backend.tables["Farm"].append(farm_row(temp="warm"))

    with pytest.raises(FetchError):
        ReadingRepository(fake_backend).get_latest()


def test_active_profile_id_uses_latest_selection(fake_backend):
    fake_backend.tables["UserVegetation"].extend(
        [
            {"UserID": 1, "VegetationID": 4, "date": "2024-01-01"},
            {"UserID": 1, "VegetationID": 7, "date": "2024-05-01"},
            {"UserID": 2, "VegetationID": 9, "date": "2024-06-01"},
        ]
    )
    repo = VegetationRepository(fake_backend)

    assert repo.get_active_profile_id(1) == 7
    assert repo.get_active_profile_id(3) is None


def test_create_profile_lets_backend_assign_id(fake_backend):
    repo = VegetationRepository(fake_backend)

    repo.create_profile(make_profile(name="Basil").with_id(99))

    _, table, row = fake_backend.calls[-1]
    assert table == "Vegetationtbl"
    assert "id" not in row
    assert row["name"] == "Basil"


def test_listing_skips_malformed_profile_rows(fake_backend):
    legacy = make_profile("Legacy").with_id(2).to_row()
    legacy["dayTempMin"], legacy["dayTempMax"] = 30, 18
    nulls = make_profile("Nulls").with_id(3).to_row()
    nulls["nightAirHumidMax"] = None
    fake_backend.tables["Vegetationtbl"].extend([make_profile().with_id(1).to_row(), legacy, nulls])

    assert [p.name for p in VegetationRepository(fake_backend).list_profiles()] == ["Tomato"]


def test_malformed_profile_lookup_raises(fake_backend):
    row = make_profile().with_id(1).to_row()
    row["dayTempMin"] = 40
    fake_backend.tables["Vegetationtbl"].append(row)

    with pytest.raises(MalformedRowError) as excinfo:
        VegetationRepository(fake_backend).get_profile(1)
    assert excinfo.value.detail["profile_id"] == 1


def test_history_listing_skips_rows_without_measurements(fake_backend):
    good = {"id": 1, "farmId": 2, "temperature": 24.0, "groundHumidity": 50, "airHumidity": 60, "recordedAt": "2024-06-02"}
    missing = dict(good, id=2, airHumidity=None, recordedAt="2024-06-01")
    fake_backend.tables["FarmHistory"].extend([good, missing])

    entries = HistoryRepository(fake_backend).list_entries()

    assert [e.id for e in entries] == [1]
    assert entries[0].ground_humidity == 50.0
