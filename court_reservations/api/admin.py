"""Administrator endpoints for reservations and courts."""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from court_reservations.api.deps import require_admin
from court_reservations.core.database import get_db
from court_reservations.models.court import Court
from court_reservations.models.user import User
from court_reservations.schemas.court import CourtCreate, CourtInDB, CourtUpdate
from court_reservations.schemas.reservation import (
    AdminReservationCreate,
    AdminReservationUpdate,
    MessageResponse,
    ReservationWithDetails,
)
from court_reservations.services.availability_service import availability_service
from court_reservations.services.reservation_service import reservation_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/reservations", response_model=List[ReservationWithDetails])
async def list_reservations(
    status: Optional[str] = None,
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    court_id: Optional[int] = Query(default=None, alias="courtId"),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    List all reservations.

    Args:
        status: confirmed or cancelled
        start_date: Earliest date (inclusive)
        end_date: Latest date (inclusive)
        court_id: Court filter
        admin: Current administrator
        db: Database session

    Returns:
        Reservations with court and user, newest first
    """
    return await reservation_service.list_reservations(
        db, court_id=court_id, status=status, start_date=start_date, end_date=end_date
    )


@router.get("/reservations/{reservation_id}", response_model=ReservationWithDetails)
async def get_reservation(
    reservation_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Get any reservation by ID."""
    return await reservation_service.get_reservation(db, reservation_id)


@router.post("/reservations", response_model=ReservationWithDetails, status_code=201)
async def create_reservation(
    reservation: AdminReservationCreate,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Book a court on behalf of a user.

    Same duration, hours and conflict rules as user bookings; past dates
    are allowed so back-office entries can be recorded.
    """
    return await reservation_service.create_reservation(
        db,
        admin,
        reservation,
        owner_id=reservation.user_id,
        enforce_past=False,
        background_tasks=background_tasks,
    )


@router.put("/reservations/{reservation_id}", response_model=ReservationWithDetails)
async def update_reservation(
    reservation_id: int,
    reservation_update: AdminReservationUpdate,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Edit any reservation, including toggling its status.

    Setting status to cancelled notifies the owner; setting it back to
    confirmed re-checks the range for conflicts.
    """
    return await reservation_service.update_reservation(
        db, admin, reservation_id, reservation_update, background_tasks=background_tasks
    )


@router.delete("/reservations/{reservation_id}", response_model=MessageResponse)
async def delete_reservation(
    reservation_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Permanently delete a reservation."""
    await reservation_service.delete_reservation(db, admin, reservation_id)
    return MessageResponse(message="Reservation deleted successfully")


@router.get("/courts", response_model=List[CourtInDB])
async def list_all_courts(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List every court, including disabled ones."""
    result = await db.execute(select(Court).order_by(Court.id))
    return result.scalars().all()


@router.post("/courts", response_model=CourtInDB, status_code=201)
async def create_court(
    court: CourtCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Add a court."""
    db_court = Court(**court.model_dump())
    db.add(db_court)
    await db.commit()
    await db.refresh(db_court)

    return db_court


@router.patch("/courts/{court_id}", response_model=CourtInDB)
async def update_court(
    court_id: int,
    court_update: CourtUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Update a court's name, description, hourly rate or active flag.

    Courts referenced by reservations are disabled with ``isActive: false``
    rather than deleted. Rate changes apply to new bookings only.
    """
    court = await availability_service.get_court(db, court_id)

    # Update fields
    update_data = court_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(court, field, value)

    await db.commit()
    await db.refresh(court)

    return court
