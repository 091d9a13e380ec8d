"""
Peak overlap search over daily windows.
Sweep-line over +1/-1 boundary events; wrap-around windows are split at
midnight and always-open windows are pinned to the whole day.
"""

from dataclasses import dataclass
from datetime import time
from typing import Iterable, List, Optional

from .domain import Restaurant
from .windows import DAY_START, END_OF_DAY, Window


@dataclass(frozen=True)
class TimeEvent:
    """Boundary event: a window opening (+1) or closing (-1)."""
    time: time
    delta: int


@dataclass(frozen=True)
class PeakResult:
    """Witness interval and the overlap count reached there."""
    start: Optional[time]
    end: Optional[time]
    count: int


def build_events(windows: Iterable[Window]) -> List[TimeEvent]:
    """Emit boundary events in input order (unsorted)."""
    events: List[TimeEvent] = []
    for window in windows:
        if window.always_open:
            events.append(TimeEvent(DAY_START, +1))
            events.append(TimeEvent(END_OF_DAY, -1))
        elif window.start <= window.end:
            events.append(TimeEvent(window.start, +1))
            events.append(TimeEvent(window.end, -1))
        else:
            # Wrap-around: [start, end-of-day) and [day-start, end)
            events.append(TimeEvent(window.start, +1))
            events.append(TimeEvent(END_OF_DAY, -1))
            events.append(TimeEvent(DAY_START, +1))
            events.append(TimeEvent(window.end, -1))
    return events


def peak(windows: Iterable[Window]) -> PeakResult:
    """
    Find the maximum number of simultaneously open windows.

    Events at the same instant keep their emission order (stable sort).
    A running count that ties the maximum moves the witness forward, so the
    result is the last elementary slice at the peak, not the widest span.

    Args:
        windows: Windows to overlap (duplicates count separately)

    Returns:
        PeakResult; start/end are None and count is 0 when there is nothing
        to sweep
    """
    events = sorted(build_events(windows), key=lambda e: e.time)

    current = 0
    best = 0
    best_start: Optional[time] = None
    best_end: Optional[time] = None

    # The last event only serves as the look-ahead end of the final slice.
    for i in range(len(events) - 1):
        current += events[i].delta
        if current >= best:
            best = current
            best_start = events[i].time
            best_end = events[i + 1].time

    return PeakResult(start=best_start, end=best_end, count=best)


def peak_deal_time(restaurants: Iterable[Restaurant]) -> PeakResult:
    """Peak over every deal of every restaurant, ignoring opening hours."""
    return peak(
        deal.availability
        for restaurant in restaurants
        for deal in restaurant.deals
    )
