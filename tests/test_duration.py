"""
Tests for the duration calculator.
"""

import pendulum

from roomtime.domain.duration import attendance_duration, compute_duration, merge_ranges
from roomtime.domain.models import IncompleteDuration, NetDuration, TimeRange


def _at(value: str):
    return pendulum.parse(f"2024-11-25 {value}", tz="Europe/Berlin")


def _range(start: str, end: str) -> TimeRange:
    return TimeRange(start=_at(start), end=_at(end))


WORKDAY = _range("09:00", "17:00")


class TestComputeDuration:
    """Tests for compute_duration."""

    def test_lunch_break(self):
        result = compute_duration(WORKDAY, [_range("12:00", "12:30")])

        assert isinstance(result, NetDuration)
        assert (result.hours, result.minutes) == (7, 30)
        assert result.format_display() == "7h 30m"

    def test_no_breaks(self):
        result = compute_duration(WORKDAY, [])

        assert result.format_display() == "8h 0m"

    def test_break_partially_outside_is_clamped(self):
        """Only the part of the break inside the session is subtracted."""
        result = compute_duration(WORKDAY, [_range("16:30", "18:00")])

        assert result.total_minutes == 7 * 60 + 30

    def test_break_fully_outside_is_ignored(self):
        result = compute_duration(WORKDAY, [_range("07:00", "08:30")])

        assert result.total_minutes == 8 * 60

    def test_overlapping_breaks_are_not_double_counted(self):
        result = compute_duration(
            WORKDAY,
            [_range("12:00", "12:30"), _range("12:15", "12:45"), _range("15:00", "15:15")],
        )

        assert result.total_minutes == 8 * 60 - 45 - 15

    def test_break_covering_session_gives_zero(self):
        result = compute_duration(_range("09:00", "10:00"), [_range("08:00", "11:00")])

        assert result == NetDuration(total_ms=0)
        assert result.format_display() == "0h 0m"

    def test_missing_enclosing_interval_is_incomplete(self):
        result = compute_duration(None, [_range("12:00", "12:30")])

        assert isinstance(result, IncompleteDuration)
        assert not result.is_complete
        assert result.format_display() != "0h 0m"

    def test_seconds_are_truncated(self):
        session = TimeRange(start=_at("09:00:00"), end=_at("09:10:59"))

        assert compute_duration(session).format_display() == "0h 10m"


class TestAttendanceDuration:
    """Tests for attendance_duration."""

    def test_clock_in_clock_out(self):
        result = attendance_duration(_at("09:00"), _at("17:00"), [_range("12:00", "12:30")])

        assert str(result) == "7h 30m"

    def test_no_clock_out(self):
        result = attendance_duration(_at("09:00"), None)

        assert isinstance(result, IncompleteDuration)


class TestMergeRanges:
    """Tests for merge_ranges."""

    def test_merges_overlapping_and_adjacent(self):
        merged = merge_ranges([
            _range("13:00", "13:30"),
            _range("12:00", "12:30"),
            _range("12:30", "12:45"),
            _range("12:40", "12:50"),
        ])

        assert merged == [_range("12:00", "12:50"), _range("13:00", "13:30")]

    def test_empty(self):
        assert merge_ranges([]) == []
