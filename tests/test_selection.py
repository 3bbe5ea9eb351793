"""
Tests for the selection reducer.
"""

import pendulum
import pytest

from roomtime.domain.availability import classify_slots
from roomtime.domain.exceptions import (
    EmptySelection,
    InvalidSelection,
    NonContiguousSelection,
    SelectionError,
)
from roomtime.domain.models import Reservation, Slot, SlotStatus, TimeRange
from roomtime.domain.selection import SelectionReducer, reduce_selection


def _at(value: str):
    return pendulum.parse(f"2024-11-25 {value}", tz="Europe/Berlin")


def _slot(start: str, end: str, status: SlotStatus = SlotStatus.AVAILABLE) -> Slot:
    return Slot(time_range=TimeRange(start=_at(start), end=_at(end)), status=status)


GRID = [
    _slot("09:00", "09:30"),
    _slot("09:30", "10:00"),
    _slot("10:00", "10:30"),
    _slot("10:30", "11:00"),
]


class TestReduceSelection:
    """Tests for reduce_selection."""

    def test_single_slot(self):
        candidate = reduce_selection([GRID[1]], GRID)

        assert candidate == TimeRange(start=_at("09:30"), end=_at("10:00"))

    def test_pick_order_is_irrelevant(self):
        """Slots picked out of order still give earliest start and latest end."""
        candidate = reduce_selection([GRID[2], GRID[0], GRID[1]], GRID)

        assert candidate.start == _at("09:00")
        assert candidate.end == _at("10:30")

    def test_gap_is_bridged_by_default(self):
        """Non-contiguous picks span the gap when contiguity is not required."""
        candidate = reduce_selection([GRID[0], GRID[2]], GRID)

        assert candidate == TimeRange(start=_at("09:00"), end=_at("10:30"))

    def test_gap_rejected_when_contiguity_required(self):
        with pytest.raises(NonContiguousSelection, match="not adjacent"):
            reduce_selection([GRID[0], GRID[2]], GRID, require_contiguous=True)

    def test_contiguous_selection_accepted_when_required(self):
        reducer = SelectionReducer(require_contiguous=True)

        candidate = reducer.reduce([GRID[3], GRID[2]], GRID)

        assert candidate == TimeRange(start=_at("10:00"), end=_at("11:00"))

    def test_empty_selection(self):
        with pytest.raises(EmptySelection):
            reduce_selection([], GRID)

    def test_repeated_pick_counts_once(self):
        candidate = reduce_selection([GRID[0], GRID[1], GRID[0]], GRID, require_contiguous=True)

        assert candidate == TimeRange(start=_at("09:00"), end=_at("10:00"))

    def test_stale_pick_is_rechecked_against_grid(self):
        """A slot that became booked since it was picked is rejected."""
        picked = GRID[1]
        fresh_grid = classify_slots(
            [slot.time_range for slot in GRID],
            _at("08:00"),
            [Reservation(id="b9", resource_id="room-a", time_range=picked.time_range)],
        )

        with pytest.raises(InvalidSelection) as excinfo:
            reduce_selection([GRID[0], picked], fresh_grid)

        assert [s.label for s in excinfo.value.slots] == ["09:30–10:00"]
        assert excinfo.value.slots[0].status is SlotStatus.BOOKED

    def test_past_slot_rejected(self):
        grid = [_slot("09:00", "09:30", SlotStatus.PAST), GRID[1]]

        with pytest.raises(InvalidSelection):
            reduce_selection([grid[0], grid[1]], grid)

    def test_slot_outside_grid_rejected(self):
        stranger = _slot("18:00", "18:30")

        with pytest.raises(InvalidSelection):
            reduce_selection([stranger], GRID)

    def test_errors_share_base_class(self):
        for exc in (EmptySelection, InvalidSelection, NonContiguousSelection):
            assert issubclass(exc, SelectionError)
