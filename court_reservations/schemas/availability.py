"""Availability schemas."""
from typing import List, Literal, Optional
from datetime import date

from court_reservations.schemas.base import CamelModel, ClockTime


class AvailabilityEntry(CamelModel):
    """An occupied range on one court and date."""

    start_time: ClockTime
    end_time: ClockTime
    type: Literal["reservation", "maintenance"]
    maintenance_type: Optional[str] = None


class TimeSlot(CamelModel):
    """One grid slot projected against availability."""

    start_time: ClockTime
    end_time: ClockTime
    is_reserved: bool
    is_maintenance: bool
    maintenance_type: Optional[str] = None
    is_past: bool


class SlotGridResponse(CamelModel):
    """Slot grid for one court and date."""

    court_id: int
    date: date
    opening_time: ClockTime
    closing_time: ClockTime
    slots: List[TimeSlot]
