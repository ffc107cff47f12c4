"""Half-hour slot grid and time-of-day helpers.

Everything here is pure: no database, no clock, no FastAPI.
"""
import re
from datetime import time as dt_time
from typing import List, NamedTuple

from court_reservations.core.exceptions import ValidationError

SLOT_MINUTES = 30

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class Slot(NamedTuple):
    """One grid window, half-open: [start_time, end_time)."""

    start_time: dt_time
    end_time: dt_time

    @property
    def label(self) -> str:
        return f"{format_time(self.start_time)}-{format_time(self.end_time)}"


def minutes_of(value: dt_time) -> int:
    """Minutes since midnight."""
    return value.hour * 60 + value.minute


def time_from_minutes(minutes: int) -> dt_time:
    if not 0 <= minutes < 24 * 60:
        raise ValueError(f"{minutes} minutes is outside a single day")
    return dt_time(hour=minutes // 60, minute=minutes % 60)


def parse_time(time_str: str) -> dt_time:
    """Parse a zero-padded 24-hour ``HH:MM`` string."""
    match = _TIME_RE.match(time_str.strip()) if isinstance(time_str, str) else None
    if not match:
        raise ValidationError(f"Invalid time '{time_str}', expected HH:MM")
    return dt_time(hour=int(match.group(1)), minute=int(match.group(2)))


def format_time(value: dt_time) -> str:
    return value.strftime("%H:%M")


def is_aligned(value: dt_time, granularity_minutes: int = SLOT_MINUTES) -> bool:
    return value.second == 0 and value.microsecond == 0 and minutes_of(value) % granularity_minutes == 0


def generate_slots(
    operating_start: dt_time,
    operating_end: dt_time,
    granularity_minutes: int = SLOT_MINUTES,
) -> List[Slot]:
    """
    Build the ordered, gap-free slot sequence for one operating window.

    The first slot starts at ``operating_start``; no slot ends after
    ``operating_end``. A trailing remainder shorter than one slot is dropped.

    Args:
        operating_start: Opening time (inclusive)
        operating_end: Closing time
        granularity_minutes: Slot length

    Returns:
        List of consecutive slots
    """
    if granularity_minutes <= 0:
        raise ValueError("granularity_minutes must be positive")

    start = minutes_of(operating_start)
    end = minutes_of(operating_end)

    slots = []
    cursor = start
    while cursor + granularity_minutes <= end:
        slot_end = cursor + granularity_minutes
        slots.append(Slot(time_from_minutes(cursor), time_from_minutes(slot_end)))
        cursor = slot_end

    return slots
