"""Maintenance period endpoints."""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from court_reservations.api.deps import require_admin
from court_reservations.core.database import get_db
from court_reservations.models.user import User
from court_reservations.schemas.maintenance import (
    MaintenancePeriodCreate,
    MaintenancePeriodCreated,
    MaintenancePeriodInDB,
    MaintenancePeriodUpdate,
)
from court_reservations.services.maintenance_service import maintenance_service

router = APIRouter(prefix="/admin/maintenance", tags=["maintenance"])


@router.post("", response_model=MaintenancePeriodCreated, status_code=201)
async def create_maintenance_period(
    maintenance: MaintenancePeriodCreate,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a maintenance period for a court.

    Every confirmed reservation in the date range whose time overlaps the
    daily window is cancelled and its owner notified.

    Args:
        maintenance: Court, date range, daily window and type
        background_tasks: Queue for cancellation e-mails
        admin: Current administrator
        db: Database session

    Returns:
        Created period with the number of cancelled reservations
    """
    period, cancelled = await maintenance_service.create_period(
        db, admin, maintenance, background_tasks=background_tasks
    )

    created = MaintenancePeriodCreated.model_validate(period)
    created.cancelled_reservations = cancelled
    return created


@router.get("", response_model=List[MaintenancePeriodInDB])
async def list_maintenance_periods(
    court_id: Optional[int] = Query(default=None, alias="courtId"),
    target_date: Optional[date] = Query(default=None, alias="date"),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List maintenance periods, optionally for a court and/or a date they cover."""
    return await maintenance_service.list_periods(db, court_id=court_id, target_date=target_date)


@router.get("/{period_id}", response_model=MaintenancePeriodInDB)
async def get_maintenance_period(
    period_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Get a maintenance period by ID."""
    return await maintenance_service.get_period(db, period_id)


@router.patch("/{period_id}", response_model=MaintenancePeriodInDB)
async def update_maintenance_period(
    period_id: int,
    maintenance_update: MaintenancePeriodUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Update a maintenance period.

    Reservations are neither cancelled nor restored by an update.
    """
    return await maintenance_service.update_period(db, admin, period_id, maintenance_update)


@router.delete("/{period_id}", status_code=204)
async def delete_maintenance_period(
    period_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a maintenance period.

    Reservations cancelled when it was created stay cancelled.
    """
    await maintenance_service.delete_period(db, admin, period_id)
