"""
Tests for the JSON file store adapter.
"""

import asyncio
import json

import pendulum
import pytest

from roomtime.adapters.json_store import JsonStore
from roomtime.domain.exceptions import BookingConflictError, DataSourceError
from roomtime.domain.models import BookingRequest, TimeRange

TZ = "Europe/Berlin"


def _at(value: str):
    return pendulum.parse(f"2024-11-25 {value}", tz=TZ)


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def data_file(tmp_path):
    return _write(
        tmp_path / "data.json",
        {
            "reservations": [
                {"id": "b1", "resource_id": "room-a", "start": "2024-11-25T10:00:00", "end": "2024-11-25T11:00:00"},
                {"id": "b2", "resource_id": "room-b", "start": "2024-11-25T10:00:00", "end": "2024-11-25T11:00:00"},
                {"id": "b3", "resource_id": "room-a", "start": "2024-11-26T10:00:00", "end": "2024-11-26T11:00:00"},
                {"id": "broken", "resource_id": "room-a", "start": "2024-11-25T12:00:00", "end": "2024-11-25T11:00:00"},
            ],
            "attendance": [
                {
                    "id": "a1",
                    "user_id": "u-7",
                    "clock_in": "2024-11-25T09:00:00",
                    "clock_out": None,
                    "breaks": [{"start": "2024-11-25T12:00:00", "end": "2024-11-25T12:30:00"}],
                },
                {"id": "a2", "user_id": "u-8", "clock_in": "2024-11-25T09:00:00"},
            ],
        },
    )


class TestJsonStore:
    """Tests for JsonStore."""

    def test_get_reservations_filters_resource_and_window(self, data_file):
        store = JsonStore(data_file=data_file, timezone=TZ)

        reservations = asyncio.run(store.get_reservations("room-a", _at("00:00"), _at("23:59")))

        assert [r.id for r in reservations] == ["b1"]
        assert reservations[0].time_range.start == _at("10:00")

    def test_invalid_entries_are_skipped(self, data_file):
        store = JsonStore(data_file=data_file, timezone=TZ)

        assert "broken" not in [r.id for r in store.all_reservations()]

    def test_create_booking_persists(self, data_file):
        store = JsonStore(data_file=data_file, timezone=TZ)
        request = BookingRequest(
            resource_id="room-a",
            time_range=TimeRange(start=_at("11:00"), end=_at("11:30")),
            title="Retro",
        )

        reservation = asyncio.run(store.create_booking(request))

        reloaded = JsonStore(data_file=data_file, timezone=TZ)
        stored = [r for r in reloaded.all_reservations() if r.id == reservation.id]
        assert len(stored) == 1
        assert stored[0].time_range == request.time_range
        assert stored[0].title == "Retro"

    def test_create_booking_rejects_overlap(self, data_file):
        store = JsonStore(data_file=data_file, timezone=TZ)
        request = BookingRequest(
            resource_id="room-a",
            time_range=TimeRange(start=_at("10:30"), end=_at("11:30")),
            title="Retro",
        )

        with pytest.raises(BookingConflictError) as excinfo:
            asyncio.run(store.create_booking(request))

        assert [r.id for r in excinfo.value.conflicts] == ["b1"]

    def test_get_attendance(self, data_file):
        store = JsonStore(data_file=data_file, timezone=TZ)

        records = asyncio.run(store.get_attendance("u-7"))

        assert len(records) == 1
        assert records[0].clock_out is None
        assert records[0].breaks[0].duration_minutes() == 30

    def test_missing_file_starts_empty(self, tmp_path):
        store = JsonStore(data_file=tmp_path / "missing.json", timezone=TZ)

        assert store.all_reservations() == []

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(DataSourceError):
            JsonStore(data_file=path)

    def test_non_mapping_root(self, tmp_path):
        path = _write(tmp_path / "data.json", [1, 2, 3])

        with pytest.raises(DataSourceError, match="mapping"):
            JsonStore(data_file=path)

    def test_failed_write_leaves_store_unchanged(self, tmp_path):
        """A booking that could not be written is not kept in memory either."""
        store = JsonStore(data_file=tmp_path / "missing-dir" / "data.json", timezone=TZ)
        request = BookingRequest(
            resource_id="room-a",
            time_range=TimeRange(start=_at("11:00"), end=_at("11:30")),
            title="Retro",
        )

        with pytest.raises(DataSourceError, match="Could not write"):
            asyncio.run(store.create_booking(request))

        assert store.all_reservations() == []
        # The same interval can be booked once the file is writable again
        (tmp_path / "missing-dir").mkdir()
        reservation = asyncio.run(store.create_booking(request))
        assert [r.id for r in store.all_reservations()] == [reservation.id]

    def test_write_replaces_file_without_leftovers(self, data_file):
        store = JsonStore(data_file=data_file, timezone=TZ)
        request = BookingRequest(
            resource_id="room-b",
            time_range=TimeRange(start=_at("14:00"), end=_at("15:00")),
            title="Review",
        )

        asyncio.run(store.create_booking(request))

        assert sorted(p.name for p in data_file.parent.iterdir()) == ["data.json"]
        saved = json.loads(data_file.read_text(encoding="utf-8"))
        assert saved["reservations"][-1]["title"] == "Review"
        assert len(saved["attendance"]) == 2
