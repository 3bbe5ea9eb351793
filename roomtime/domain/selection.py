"""
Reduction of a user's slot selection into a single reservation interval.
"""

from typing import Dict, List, Sequence

from .exceptions import EmptySelection, InvalidSelection, NonContiguousSelection
from .models import Slot, TimeRange


class SelectionReducer:
    """
    Turns the slots picked in one interaction into one candidate interval.

    Algorithm:
    1. Reject an empty selection
    2. Re-check every pick against the freshly classified grid
    3. Sort the picks chronologically (pick order is irrelevant)
    4. Optionally require that consecutive picks touch
    5. Return [earliest start, latest end)
    """

    def __init__(self, require_contiguous: bool = False):
        self.require_contiguous = require_contiguous

    def reduce(self, selection: Sequence[Slot], grid: Sequence[Slot]) -> TimeRange:
        """
        Reduce the selection to a candidate interval.

        Args:
            selection: Slots in the order the user picked them
            grid: Current classification of the day's slots

        Returns:
            TimeRange spanning the selection

        Raises:
            EmptySelection: If nothing was selected
            InvalidSelection: If a pick is not AVAILABLE in the grid
            NonContiguousSelection: If contiguity is required and there is a gap
        """
        if not selection:
            raise EmptySelection()

        picks = self._current_picks(selection, grid)
        ordered = sorted(picks, key=lambda slot: slot.time_range.start)

        if self.require_contiguous:
            self._check_contiguous(ordered)

        return TimeRange(
            start=ordered[0].time_range.start,
            end=max(slot.time_range.end for slot in ordered)
        )

    def _current_picks(self, selection: Sequence[Slot], grid: Sequence[Slot]) -> List[Slot]:
        """
        Replace each pick with its current grid entry, dropping repeated picks.

        The status carried by the pick itself may be stale, so only the grid is trusted.
        """
        by_range: Dict[TimeRange, Slot] = {slot.time_range: slot for slot in grid}
        current: Dict[TimeRange, Slot] = {}
        unavailable: List[Slot] = []
        seen = set()

        for pick in selection:
            if pick.time_range in seen:
                continue
            seen.add(pick.time_range)
            fresh = by_range.get(pick.time_range)
            if fresh is None or not fresh.is_available:
                unavailable.append(fresh or pick)
                continue
            current[pick.time_range] = fresh

        if unavailable:
            raise InvalidSelection(unavailable)

        return list(current.values())

    @staticmethod
    def _check_contiguous(ordered: List[Slot]) -> None:
        for previous, following in zip(ordered, ordered[1:]):
            if previous.time_range.end != following.time_range.start:
                raise NonContiguousSelection(
                    f"Selected slots {previous.label} and {following.label} are not adjacent"
                )


def reduce_selection(
    selection: Sequence[Slot],
    grid: Sequence[Slot],
    *,
    require_contiguous: bool = False
) -> TimeRange:
    """Convenience wrapper around ``SelectionReducer.reduce``."""
    return SelectionReducer(require_contiguous=require_contiguous).reduce(selection, grid)
