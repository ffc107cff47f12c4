"""Maintenance period schemas."""
from pydantic import ConfigDict
from typing import Optional
from datetime import datetime, date

from court_reservations.schemas.base import CamelModel, ClockTime


class MaintenancePeriodBase(CamelModel):
    """Base maintenance period schema."""

    court_id: int
    start_date: date
    end_date: date
    start_time: ClockTime
    end_time: ClockTime
    type: str = "maintenance"  # maintenance, winter_season
    description: Optional[str] = None


class MaintenancePeriodCreate(MaintenancePeriodBase):
    """Schema for creating a maintenance period."""

    pass


class MaintenancePeriodUpdate(CamelModel):
    """Schema for updating a maintenance period."""

    court_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    type: Optional[str] = None
    description: Optional[str] = None


class MaintenancePeriodInDB(MaintenancePeriodBase):
    """Schema for maintenance period from database."""

    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MaintenancePeriodCreated(MaintenancePeriodInDB):
    """Created maintenance period plus the number of reservations it cancelled."""

    cancelled_reservations: int = 0
