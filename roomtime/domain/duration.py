"""
Net duration of an interval after subtracting breaks.
"""

from typing import Iterable, List, Optional, Union

from pendulum import DateTime

from .models import IncompleteDuration, NetDuration, TimeRange

DurationResult = Union[NetDuration, IncompleteDuration]


def merge_ranges(ranges: Iterable[TimeRange]) -> List[TimeRange]:
    """
    Merge overlapping or adjacent time ranges into a disjoint cover.

    Example: [12:00-12:30, 12:15-12:45, 15:00-15:10] -> [12:00-12:45, 15:00-15:10]
    """
    sorted_ranges = sorted(ranges, key=lambda r: r.start)
    if not sorted_ranges:
        return []

    merged: List[TimeRange] = [sorted_ranges[0]]

    for current in sorted_ranges[1:]:
        last = merged[-1]

        if current.start <= last.end:
            merged[-1] = TimeRange(
                start=last.start,
                end=max(last.end, current.end)
            )
        else:
            merged.append(current)

    return merged


def compute_duration(
    enclosing: Optional[TimeRange],
    breaks: Iterable[TimeRange] = ()
) -> DurationResult:
    """
    Compute net elapsed time of ``enclosing`` minus ``breaks``.

    Breaks are clamped to the enclosing range and merged first, so a break
    sticking out of the session or two overlapping breaks are never
    subtracted twice.

    Args:
        enclosing: Session range, or None while the session is still open
        breaks: Pauses to exclude; need not lie inside ``enclosing``

    Returns:
        NetDuration, or IncompleteDuration when ``enclosing`` is None
    """
    if enclosing is None:
        return IncompleteDuration()

    clamped = []
    for pause in breaks:
        overlap = enclosing.intersect(pause)
        if overlap is not None:
            clamped.append(overlap)

    paused_ms = sum(r.duration_ms() for r in merge_ranges(clamped))

    return NetDuration(total_ms=max(0, enclosing.duration_ms() - paused_ms))


def attendance_duration(
    clock_in: DateTime,
    clock_out: Optional[DateTime],
    breaks: Iterable[TimeRange] = ()
) -> DurationResult:
    """Net worked time for a clock-in/clock-out pair."""
    if clock_out is None:
        return IncompleteDuration()

    return compute_duration(TimeRange(start=clock_in, end=clock_out), breaks)
