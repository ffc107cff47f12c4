"""Booking validation rules.

Two entry points share the same policy:

* ``validate_slot_selection`` checks a set of picked grid slots
  ("HH:MM-HH:MM" labels) and reports the first failing rule.
* ``validate_time_range`` and friends check an already collapsed
  start/end pair on the server and raise ``ValidationError``.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time as dt_time
from typing import Iterable, List, Optional, Tuple

from court_reservations.core.config import settings
from court_reservations.core.exceptions import ValidationError
from court_reservations.services.slot_grid import (
    format_time,
    is_aligned,
    minutes_of,
    parse_time,
)

logger = logging.getLogger(__name__)

ERROR_EMPTY = "Select at least one time slot"
ERROR_TOO_MANY = "Maximum reservation length is {minutes} minutes ({slots} time slots)"
ERROR_MALFORMED = "Invalid time slot '{slot}', expected HH:MM-HH:MM"
ERROR_MISALIGNED = "Time slot '{slot}' is not a {minutes}-minute grid slot"
ERROR_NOT_CONTIGUOUS = "Time slots must be consecutive, without gaps"


@dataclass(frozen=True)
class BookingValidation:
    """Outcome of a slot selection check."""

    valid: bool
    error: Optional[str] = None
    start_time: Optional[dt_time] = None
    end_time: Optional[dt_time] = None


def _parse_slot_label(label: str) -> Tuple[dt_time, dt_time]:
    start_str, sep, end_str = label.partition("-")
    if not sep:
        raise ValidationError(ERROR_MALFORMED.format(slot=label))
    try:
        return parse_time(start_str), parse_time(end_str)
    except ValidationError:
        raise ValidationError(ERROR_MALFORMED.format(slot=label)) from None


def validate_slot_selection(
    selected_slots: Iterable[str],
    slot_minutes: int = None,
    max_slots: int = None,
) -> BookingValidation:
    """
    Check a selection of grid slots.

    Rules are applied in order and the first failure is reported:
    non-empty, at most ``max_slots`` slots, each slot a well-formed grid
    slot, and consecutive slots (no gaps, duplicates or overlaps).

    Args:
        selected_slots: Slot labels such as "09:00-09:30"
        slot_minutes: Grid granularity (defaults to settings)
        max_slots: Maximum slots per booking (defaults to settings)

    Returns:
        BookingValidation with the collapsed range on success
    """
    slot_minutes = slot_minutes or settings.SLOT_MINUTES
    max_slots = max_slots or settings.MAX_SLOTS_PER_BOOKING
    labels = list(selected_slots)

    if not labels:
        return BookingValidation(valid=False, error=ERROR_EMPTY)

    if len(labels) > max_slots:
        return BookingValidation(
            valid=False,
            error=ERROR_TOO_MANY.format(minutes=max_slots * slot_minutes, slots=max_slots),
        )

    slots: List[Tuple[dt_time, dt_time]] = []
    for label in labels:
        try:
            start, end = _parse_slot_label(label)
        except ValidationError as e:
            return BookingValidation(valid=False, error=e.detail)
        if not is_aligned(start, slot_minutes) or minutes_of(end) - minutes_of(start) != slot_minutes:
            return BookingValidation(
                valid=False,
                error=ERROR_MISALIGNED.format(slot=label, minutes=slot_minutes),
            )
        slots.append((start, end))

    slots.sort()
    for previous, current in zip(slots, slots[1:]):
        if current[0] != previous[1]:
            return BookingValidation(valid=False, error=ERROR_NOT_CONTIGUOUS)

    return BookingValidation(valid=True, start_time=slots[0][0], end_time=slots[-1][1])


def validate_time_range(
    start_time: dt_time,
    end_time: dt_time,
    slot_minutes: int = None,
    max_minutes: int = None,
) -> int:
    """
    Enforce duration policy on a start/end pair.

    Returns:
        Duration in minutes

    Raises:
        ValidationError: If the range is empty, misaligned or too long
    """
    slot_minutes = slot_minutes or settings.SLOT_MINUTES
    max_minutes = max_minutes or settings.max_booking_minutes

    if end_time <= start_time:
        raise ValidationError("End time must be after start time")

    if not (is_aligned(start_time, slot_minutes) and is_aligned(end_time, slot_minutes)):
        raise ValidationError(
            f"Reservation times must be aligned to {slot_minutes}-minute slots"
        )

    duration = minutes_of(end_time) - minutes_of(start_time)
    if duration > max_minutes:
        raise ValidationError(
            ERROR_TOO_MANY.format(minutes=max_minutes, slots=max_minutes // slot_minutes)
        )

    return duration


def validate_within_operating_hours(target_date: date, start_time: dt_time, end_time: dt_time) -> None:
    """Reject ranges outside the opening hours of the date's weekday class."""
    opening, closing = settings.operating_hours_for(target_date)
    if start_time < opening or end_time > closing:
        raise ValidationError(
            f"Reservations on {target_date.isoformat()} must be between "
            f"{format_time(opening)} and {format_time(closing)}"
        )


def validate_not_in_past(target_date: date, start_time: dt_time, now: datetime) -> None:
    """
    Reject ranges that already started.

    Args:
        target_date: Facility-local date
        start_time: Facility-local start time
        now: Current facility-local time (naive or aware, compared as wall clock)
    """
    starts_at = datetime.combine(target_date, start_time)
    if starts_at <= now.replace(tzinfo=None):
        logger.info(f"Rejected booking in the past: {target_date} {format_time(start_time)}")
        raise ValidationError("Cannot book a time slot in the past")
