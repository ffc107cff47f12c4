"""Court schemas."""
from pydantic import ConfigDict, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

from court_reservations.schemas.base import CamelModel


class CourtBase(CamelModel):
    """Base court schema."""

    name: str = Field(min_length=1)
    description: Optional[str] = None
    hourly_rate: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    is_active: bool = True


class CourtCreate(CourtBase):
    """Schema for creating a court."""

    pass


class CourtUpdate(CamelModel):
    """Schema for updating a court (pricing, description, soft-disable)."""

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    hourly_rate: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    is_active: Optional[bool] = None


class CourtInDB(CourtBase):
    """Schema for court from database."""

    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
