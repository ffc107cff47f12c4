"""Maintenance periods and the cancellation cascade they trigger."""
import logging
from datetime import date, time as dt_time
from typing import List, Optional, Tuple

from fastapi import BackgroundTasks
from sqlalchemy import select, update, and_, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from court_reservations.core.database import lock_court_day, lock_court_days
from court_reservations.core.exceptions import NotFoundError, StorageError, ValidationError
from court_reservations.models.maintenance_period import (
    MaintenancePeriod,
    MAINTENANCE_TYPES,
    TYPE_WINTER_SEASON,
)
from court_reservations.models.reservation import Reservation, STATUS_CANCELLED, STATUS_CONFIRMED
from court_reservations.models.user import User
from court_reservations.schemas.maintenance import MaintenancePeriodCreate, MaintenancePeriodUpdate
from court_reservations.services import policy
from court_reservations.services.availability_service import availability_service
from court_reservations.services.conflict_checker import overlaps
from court_reservations.services.notification_service import (
    KIND_CANCELLATION,
    REASON_MAINTENANCE,
    REASON_WINTER_SEASON,
    ReservationNotice,
    notification_service,
)

logger = logging.getLogger(__name__)


def cancellation_reason(maintenance_type: str) -> str:
    if maintenance_type == TYPE_WINTER_SEASON:
        return REASON_WINTER_SEASON
    return REASON_MAINTENANCE


def _validate_window(
    start_date: date,
    end_date: date,
    start_time: dt_time,
    end_time: dt_time,
    maintenance_type: str,
) -> None:
    if maintenance_type not in MAINTENANCE_TYPES:
        raise ValidationError(
            f"Invalid maintenance type '{maintenance_type}', expected one of {', '.join(MAINTENANCE_TYPES)}"
        )
    if end_date < start_date:
        raise ValidationError("End date must not be before start date")
    if end_time <= start_time:
        raise ValidationError("End time must be after start time")


class MaintenanceService:
    """Service for admin-declared blackout windows."""

    def __init__(self, notifier=None):
        self.notifier = notifier or notification_service

    async def list_periods(
        self,
        db: AsyncSession,
        court_id: Optional[int] = None,
        target_date: Optional[date] = None,
    ) -> List[MaintenancePeriod]:
        """Maintenance periods, optionally for one court and/or covering one date."""
        conditions = []
        if court_id:
            conditions.append(MaintenancePeriod.court_id == court_id)
        if target_date:
            conditions.append(MaintenancePeriod.start_date <= target_date)
            conditions.append(MaintenancePeriod.end_date >= target_date)

        query = select(MaintenancePeriod)
        if conditions:
            query = query.where(and_(*conditions))

        result = await db.execute(
            query.order_by(MaintenancePeriod.start_date, MaintenancePeriod.start_time)
        )
        return list(result.scalars().all())

    async def get_period(self, db: AsyncSession, period_id: int) -> MaintenancePeriod:
        result = await db.execute(select(MaintenancePeriod).where(MaintenancePeriod.id == period_id))
        period = result.scalar_one_or_none()

        if not period:
            raise NotFoundError("Maintenance period not found")

        return period

    async def find_affected_reservations(
        self,
        db: AsyncSession,
        court_id: int,
        start_date: date,
        end_date: date,
        start_time: dt_time,
        end_time: dt_time,
    ) -> List[Reservation]:
        """Confirmed reservations in the date range whose time of day overlaps the window."""
        result = await db.execute(
            select(Reservation)
            .where(
                and_(
                    Reservation.court_id == court_id,
                    Reservation.status == STATUS_CONFIRMED,
                    Reservation.date >= start_date,
                    Reservation.date <= end_date,
                )
            )
            .order_by(Reservation.date, Reservation.start_time)
        )
        return [
            reservation
            for reservation in result.scalars().all()
            if overlaps(start_time, end_time, reservation.start_time, reservation.end_time)
        ]

    async def create_period(
        self,
        db: AsyncSession,
        actor: User,
        data: MaintenancePeriodCreate,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> Tuple[MaintenancePeriod, int]:
        """
        Declare a blackout window and cancel the reservations it covers.

        The period is committed first, under the booking lock of every day
        it spans, so no booking can slip in between the cascade scan and
        the period becoming visible to the conflict check.

        Args:
            db: Database session
            actor: Administrator
            data: Court, date range, daily window and type
            background_tasks: Where to queue cancellation e-mails

        Returns:
            Tuple of (created period, number of cancelled reservations)
        """
        policy.ensure_admin(actor)
        _validate_window(data.start_date, data.end_date, data.start_time, data.end_time, data.type)
        await availability_service.get_court(db, data.court_id)

        await lock_court_days(db, data.court_id, data.start_date, data.end_date)
        period = MaintenancePeriod(**data.model_dump())
        db.add(period)
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to create maintenance period: {e}", exc_info=True)
            raise StorageError("Failed to create maintenance period") from e

        cancelled = await self._cancel_overlapping(db, period, background_tasks)
        await db.refresh(period)
        logger.info(
            f"Maintenance period {period.id} ({period.type}) on court {period.court_id} "
            f"{period.start_date}..{period.end_date} created, {cancelled} reservation(s) cancelled"
        )
        return period, cancelled

    async def _cancel_overlapping(
        self,
        db: AsyncSession,
        period: MaintenancePeriod,
        background_tasks: Optional[BackgroundTasks],
    ) -> int:
        """Cancel each affected reservation in its own transaction."""
        affected = await self.find_affected_reservations(
            db,
            period.court_id,
            period.start_date,
            period.end_date,
            period.start_time,
            period.end_time,
        )
        # Snapshot before any commit or rollback touches ORM state
        targets = [
            (reservation.id, reservation.court_id, reservation.date, ReservationNotice.from_reservation(reservation))
            for reservation in affected
        ]
        reason = cancellation_reason(period.type)

        cancelled = 0
        for reservation_id, court_id, reservation_date, notice in targets:
            try:
                await lock_court_day(db, court_id, reservation_date)
                result = await db.execute(
                    update(Reservation)
                    .where(
                        and_(
                            Reservation.id == reservation_id,
                            Reservation.status == STATUS_CONFIRMED,
                        )
                    )
                    .values(status=STATUS_CANCELLED, updated_at=func.now())
                    .execution_options(synchronize_session=False)
                )
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(f"Failed to cancel reservation {reservation_id} for maintenance: {e}", exc_info=True)
                continue

            if result.rowcount == 0:
                continue

            cancelled += 1
            logger.info(f"Reservation {reservation_id} cancelled: {reason}")
            if background_tasks is not None:
                background_tasks.add_task(self.notifier.deliver, KIND_CANCELLATION, notice, reason)
            else:
                await self.notifier.deliver(KIND_CANCELLATION, notice, reason)

        return cancelled

    async def update_period(
        self,
        db: AsyncSession,
        actor: User,
        period_id: int,
        data: MaintenancePeriodUpdate,
    ) -> MaintenancePeriod:
        """Edit a period. Does not cancel or restore any reservation."""
        policy.ensure_admin(actor)
        period = await self.get_period(db, period_id)

        update_data = data.model_dump(exclude_unset=True)
        merged = {
            field: update_data.get(field) or getattr(period, field)
            for field in ("start_date", "end_date", "start_time", "end_time", "type")
        }
        _validate_window(
            merged["start_date"],
            merged["end_date"],
            merged["start_time"],
            merged["end_time"],
            merged["type"],
        )
        if update_data.get("court_id"):
            await availability_service.get_court(db, update_data["court_id"])

        for field, value in update_data.items():
            if value is not None or field == "description":
                setattr(period, field, value)

        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to update maintenance period {period_id}: {e}", exc_info=True)
            raise StorageError("Failed to update maintenance period") from e

        await db.refresh(period)
        logger.info(f"Maintenance period {period_id} updated by admin {actor.id}")
        return period

    async def delete_period(self, db: AsyncSession, actor: User, period_id: int) -> None:
        """Remove a period. Reservations it cancelled stay cancelled."""
        policy.ensure_admin(actor)
        period = await self.get_period(db, period_id)

        await db.delete(period)
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to delete maintenance period {period_id}: {e}", exc_info=True)
            raise StorageError("Failed to delete maintenance period") from e

        logger.info(f"Maintenance period {period_id} deleted by admin {actor.id}")


# Singleton instance
maintenance_service = MaintenanceService()
