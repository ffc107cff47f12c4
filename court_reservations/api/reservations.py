"""Reservation endpoints for signed-in users."""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from court_reservations.api.deps import get_current_user
from court_reservations.core.database import get_db
from court_reservations.models.reservation import STATUS_CONFIRMED
from court_reservations.models.user import User
from court_reservations.schemas.reservation import (
    MessageResponse,
    PublicReservation,
    ReservationCreate,
    ReservationUpdate,
    ReservationWithDetails,
    SlotSelection,
    SlotSelectionResult,
)
from court_reservations.services.booking_validator import validate_slot_selection
from court_reservations.services.reservation_service import reservation_service

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.get("/public", response_model=List[PublicReservation])
async def list_public_reservations(
    target_date: Optional[date] = Query(default=None, alias="date"),
    court_id: Optional[int] = Query(default=None, alias="courtId"),
    db: AsyncSession = Depends(get_db),
):
    """
    List confirmed reservations across courts without user details.

    Args:
        target_date: Facility-local date
        court_id: Optional court filter
        db: Database session

    Returns:
        Occupied ranges with their court
    """
    return await reservation_service.list_reservations(
        db, court_id=court_id, target_date=target_date, status=STATUS_CONFIRMED
    )


@router.post("/validate", response_model=SlotSelectionResult)
async def validate_selection(selection: SlotSelection):
    """
    Check a selection of grid slots before booking.

    Reports the first failing rule: empty selection, too many slots,
    malformed slot, or slots that are not consecutive.
    """
    outcome = validate_slot_selection(selection.slots)
    return SlotSelectionResult(
        valid=outcome.valid,
        error=outcome.error,
        start_time=outcome.start_time,
        end_time=outcome.end_time,
    )


@router.get("", response_model=List[ReservationWithDetails])
async def list_my_reservations(
    status: Optional[str] = None,
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the current user's reservations, newest first."""
    return await reservation_service.list_reservations(
        db, user_id=user.id, status=status, start_date=start_date, end_date=end_date
    )


@router.post("", response_model=ReservationWithDetails, status_code=201)
async def create_reservation(
    reservation: ReservationCreate,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Book a court for the current user.

    The range must be 30-minute aligned, at most 120 minutes, inside
    operating hours and not in the past. The price is computed from the
    court's hourly rate; any client-sent total is ignored.

    Returns:
        Created reservation (409 if the range is taken)
    """
    return await reservation_service.create_reservation(
        db, user, reservation, background_tasks=background_tasks
    )


@router.get("/{reservation_id}", response_model=ReservationWithDetails)
async def get_reservation(
    reservation_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get one of the current user's reservations."""
    return await reservation_service.get_reservation_for(db, user, reservation_id)


@router.put("/{reservation_id}", response_model=ReservationWithDetails)
async def update_reservation(
    reservation_id: int,
    reservation_update: ReservationUpdate,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Change court, date, time or notes of an owned reservation.

    The new range is checked against every other confirmed reservation.
    """
    return await reservation_service.update_reservation(
        db, user, reservation_id, reservation_update, background_tasks=background_tasks
    )


@router.delete("/{reservation_id}", response_model=MessageResponse)
async def cancel_reservation(
    reservation_id: int,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Cancel an owned reservation. The row is kept with status cancelled."""
    await reservation_service.cancel_reservation(
        db, user, reservation_id, background_tasks=background_tasks
    )
    return MessageResponse(message="Reservation cancelled successfully")
