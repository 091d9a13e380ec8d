"""Clock-time helpers: parse feed time strings and render them back."""

from datetime import datetime, time
from typing import Optional


class InvalidTimeFormat(ValueError):
    """Raised when a time string is not in 'h:mma' form (e.g. '3:00pm')."""


CLOCK_FORMAT = "%I:%M%p"  # '3:00PM' / '12:30AM'


def parse_clock(raw: Optional[str]) -> Optional[time]:
    """Parse a 12-hour time like '3:00pm' or '3:00 PM'; blank -> None."""
    if raw is None or not raw.strip():
        return None
    normalized = raw.replace(" ", "").upper()  # '3:00 pm' -> '3:00PM'
    try:
        return datetime.strptime(normalized, CLOCK_FORMAT).time()
    except ValueError:
        raise InvalidTimeFormat(f"Cannot parse time '{raw}', expected e.g. '3:00pm'")


def format_clock(t: Optional[time]) -> Optional[str]:
    """Render HH:MM, adding seconds and fraction only when present."""
    if t is None:
        return None
    if t.microsecond:
        return t.isoformat(timespec="microseconds")
    if t.second:
        return t.isoformat(timespec="seconds")
    return t.isoformat(timespec="minutes")
