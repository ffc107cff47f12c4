"""Reservation schemas."""
import datetime as dt
from pydantic import ConfigDict, Field
from typing import List, Literal, Optional
from datetime import datetime, date
from decimal import Decimal

from court_reservations.schemas.base import CamelModel, ClockTime
from court_reservations.schemas.court import CourtInDB
from court_reservations.schemas.user import UserPublic


class ReservationBase(CamelModel):
    """Base reservation schema."""

    court_id: int
    date: date
    start_time: ClockTime
    end_time: ClockTime
    notes: Optional[str] = None


class ReservationCreate(ReservationBase):
    """Schema for booking a court.

    ``total_price`` is accepted for compatibility with clients that compute
    it, but the stored price is always recomputed from the court's rate.
    """

    total_price: Optional[Decimal] = None


class AdminReservationCreate(ReservationCreate):
    """Schema for an administrator booking on behalf of a user."""

    user_id: str


class ReservationUpdate(CamelModel):
    """Schema for changing a reservation's court, date or time."""

    court_id: Optional[int] = None
    date: Optional[dt.date] = None
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    notes: Optional[str] = None


class AdminReservationUpdate(ReservationUpdate):
    """Schema for administrator edits, including the status toggle."""

    status: Optional[Literal["confirmed", "cancelled"]] = None


class ReservationInDB(ReservationBase):
    """Schema for reservation from database."""

    id: int
    user_id: str
    total_price: Decimal
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReservationWithDetails(ReservationInDB):
    """Reservation with its court and owner."""

    court: CourtInDB
    user: UserPublic


class PublicReservation(CamelModel):
    """Occupied range without any user details."""

    id: int
    court_id: int
    date: date
    start_time: ClockTime
    end_time: ClockTime
    court: CourtInDB

    model_config = ConfigDict(from_attributes=True)


class SlotSelection(CamelModel):
    """Grid slots picked by a client, e.g. ["09:00-09:30", "09:30-10:00"]."""

    slots: List[str] = Field(default_factory=list)


class SlotSelectionResult(CamelModel):
    """Outcome of checking a slot selection."""

    valid: bool
    error: Optional[str] = None
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None


class MessageResponse(CamelModel):
    """Plain confirmation message."""

    message: str
