"""
Daily time windows and the membership test.
A window is either open all day or bounded by two clock times; a start
later than the end wraps past midnight.
"""

from dataclasses import dataclass
from datetime import time
from typing import Optional

# Day bounds used when a window has to be pinned to the whole dial.
DAY_START = time.min
END_OF_DAY = time.max  # 23:59:59.999999, stands in for 24:00 exclusive


class MalformedWindowError(ValueError):
    """A window was given exactly one of its two bounds."""


class MissingBusinessHoursError(ValueError):
    """A restaurant has no opening hours to gate on."""


@dataclass(frozen=True)
class Window:
    """Recurring daily window; both bounds set, or neither for always open."""
    start: Optional[time] = None
    end: Optional[time] = None

    def __post_init__(self):
        if (self.start is None) != (self.end is None):
            raise MalformedWindowError(
                f"Window needs both bounds or neither, got start={self.start} end={self.end}"
            )

    @classmethod
    def always(cls) -> "Window":
        return cls()

    @classmethod
    def between(cls, start: time, end: time) -> "Window":
        if start is None or end is None:
            raise MalformedWindowError("Bounded window requires start and end")
        return cls(start, end)

    @property
    def always_open(self) -> bool:
        return self.start is None

    @property
    def wraps(self) -> bool:
        """True when the window runs past midnight (start after end)."""
        return not self.always_open and self.start > self.end


def contains(window: Window, t: time) -> bool:
    """
    Check whether clock time t falls inside the window.

    Normal windows are half-open: start included, end excluded.
    Wrap-around windows (20:00 -> 02:00) exclude BOTH the start and the end
    instant. Unlike the normal case, the start instant is not a member.
    """
    if window.always_open:
        return True

    if window.start <= window.end:
        return window.start <= t < window.end

    # [start -> 24:00) and [00:00 -> end)
    return t > window.start or t < window.end
