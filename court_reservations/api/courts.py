"""Court and availability endpoints."""
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from court_reservations.core.database import get_db
from court_reservations.models.court import Court
from court_reservations.schemas.availability import AvailabilityEntry, SlotGridResponse
from court_reservations.schemas.court import CourtInDB
from court_reservations.services.availability_service import availability_service

router = APIRouter(prefix="/courts", tags=["courts"])


@router.get("", response_model=List[CourtInDB])
async def list_courts(db: AsyncSession = Depends(get_db)):
    """
    List courts open for booking.

    Returns:
        Active courts ordered by ID
    """
    result = await db.execute(
        select(Court).where(Court.is_active == True).order_by(Court.id)  # noqa: E712
    )
    return result.scalars().all()


@router.get("/{court_id}", response_model=CourtInDB)
async def get_court(
    court_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a specific court by ID."""
    return await availability_service.get_court(db, court_id)


@router.get("/{court_id}/availability", response_model=List[AvailabilityEntry])
async def get_court_availability(
    court_id: int,
    target_date: date = Query(default=None, alias="date", description="Date (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db),
):
    """
    Get occupied ranges for a court on a date.

    Returns one entry per confirmed reservation and one per maintenance
    window applying to the date, ordered by start time.

    Args:
        court_id: Court ID
        target_date: Facility-local date
        db: Database session

    Returns:
        List of occupied ranges
    """
    if target_date is None:
        raise HTTPException(status_code=400, detail="Date parameter is required")

    return await availability_service.get_availability(db, court_id, target_date)


@router.get("/{court_id}/slots", response_model=SlotGridResponse)
async def get_court_slots(
    court_id: int,
    target_date: date = Query(default=None, alias="date", description="Date (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the half-hour slot grid for a court on a date.

    Each slot is flagged as reserved, under maintenance and/or in the past.
    """
    if target_date is None:
        raise HTTPException(status_code=400, detail="Date parameter is required")

    return await availability_service.get_slot_grid(db, court_id, target_date)
