"""Reservation lifecycle: create, update, cancel and delete.

Every mutation follows the same order: authorization, input policy,
then lock -> conflict check -> write -> commit as one transaction, and
finally a best-effort notification once the change is committed.
"""
import logging
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from fastapi import BackgroundTasks
from sqlalchemy import select, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from court_reservations.core.clock import facility_now
from court_reservations.core.database import lock_court_day
from court_reservations.core.exceptions import (
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from court_reservations.models.court import Court
from court_reservations.models.reservation import (
    Reservation,
    STATUS_CANCELLED,
    STATUS_CONFIRMED,
)
from court_reservations.models.user import User
from court_reservations.schemas.reservation import ReservationCreate, ReservationUpdate
from court_reservations.services import policy
from court_reservations.services.availability_service import availability_service
from court_reservations.services.booking_validator import (
    validate_not_in_past,
    validate_time_range,
    validate_within_operating_hours,
)
from court_reservations.services.conflict_checker import has_conflict
from court_reservations.services.notification_service import (
    KIND_CANCELLATION,
    KIND_CONFIRMATION,
    KIND_UPDATE,
    REASON_ADMIN,
    REASON_USER,
    ReservationNotice,
    notification_service,
)
from court_reservations.services.slot_grid import format_time

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "Time slot is already reserved"
_SCHEDULE_FIELDS = ("court_id", "date", "start_time", "end_time")


def compute_total_price(hourly_rate: Decimal, duration_minutes: int) -> Decimal:
    """Hourly rate times booked hours, rounded to cents."""
    total = Decimal(hourly_rate) * Decimal(duration_minutes) / Decimal(60)
    return total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class ReservationService:
    """Service orchestrating the reservation lifecycle."""

    def __init__(self, notifier=None):
        self.notifier = notifier or notification_service

    async def list_reservations(
        self,
        db: AsyncSession,
        user_id: Optional[str] = None,
        court_id: Optional[int] = None,
        target_date: Optional[date] = None,
        status: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Reservation]:
        """
        List reservations matching optional filters.

        Returns:
            Reservations, newest date first
        """
        conditions = []
        if user_id:
            conditions.append(Reservation.user_id == user_id)
        if court_id:
            conditions.append(Reservation.court_id == court_id)
        if target_date:
            conditions.append(Reservation.date == target_date)
        if status:
            conditions.append(Reservation.status == status)
        if start_date:
            conditions.append(Reservation.date >= start_date)
        if end_date:
            conditions.append(Reservation.date <= end_date)

        query = select(Reservation)
        if conditions:
            query = query.where(and_(*conditions))

        result = await db.execute(
            query.order_by(Reservation.date.desc(), Reservation.start_time.desc())
        )
        return list(result.scalars().all())

    async def get_reservation(self, db: AsyncSession, reservation_id: int) -> Reservation:
        result = await db.execute(
            select(Reservation)
            .where(Reservation.id == reservation_id)
            .execution_options(populate_existing=True)
        )
        reservation = result.scalar_one_or_none()

        if not reservation:
            raise NotFoundError("Reservation not found")

        return reservation

    async def get_reservation_for(self, db: AsyncSession, actor: User, reservation_id: int) -> Reservation:
        reservation = await self.get_reservation(db, reservation_id)
        policy.ensure_can_view(actor, reservation)
        return reservation

    async def _get_bookable_court(self, db: AsyncSession, court_id: int) -> Court:
        court = await availability_service.get_court(db, court_id)
        if not court.is_active:
            raise ValidationError(f"Court '{court.name}' is not open for booking")
        return court

    def _price_for_range(
        self,
        court: Court,
        target_date: date,
        start_time,
        end_time,
        enforce_past: bool,
        now: Optional[datetime],
    ) -> Decimal:
        """Apply the booking policy to a range and price it."""
        duration = validate_time_range(start_time, end_time)
        validate_within_operating_hours(target_date, start_time, end_time)
        if enforce_past:
            validate_not_in_past(target_date, start_time, now or facility_now())
        return compute_total_price(court.hourly_rate, duration)

    async def _ensure_range_free(
        self,
        db: AsyncSession,
        court_id: int,
        target_date: date,
        start_time,
        end_time,
        exclude_reservation_id: Optional[int] = None,
    ) -> None:
        """Lock the court day, then reject overlaps with reservations or maintenance."""
        await lock_court_day(db, court_id, target_date)

        if await has_conflict(db, court_id, target_date, start_time, end_time, exclude_reservation_id):
            raise ConflictError(CONFLICT_MESSAGE)

        period = await availability_service.find_maintenance_overlap(
            db, court_id, target_date, start_time, end_time
        )
        if period:
            raise ConflictError(
                f"Court is closed for {period.type.replace('_', ' ')} "
                f"from {format_time(period.start_time)} to {format_time(period.end_time)}"
            )

    async def _commit(self, db: AsyncSession, action: str) -> None:
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to {action}: {e}", exc_info=True)
            raise StorageError(f"Failed to {action}") from e

    async def _notify(
        self,
        background_tasks: Optional[BackgroundTasks],
        kind: str,
        reservation: Reservation,
        reason: Optional[str] = None,
    ) -> None:
        notice = ReservationNotice.from_reservation(reservation)
        if background_tasks is not None:
            background_tasks.add_task(self.notifier.deliver, kind, notice, reason)
        else:
            await self.notifier.deliver(kind, notice, reason)

    async def create_reservation(
        self,
        db: AsyncSession,
        actor: User,
        data: ReservationCreate,
        owner_id: Optional[str] = None,
        enforce_past: bool = True,
        background_tasks: Optional[BackgroundTasks] = None,
        now: Optional[datetime] = None,
    ) -> Reservation:
        """
        Book a court.

        Args:
            db: Database session
            actor: User performing the booking
            data: Requested court, date and range
            owner_id: Owner when an admin books for someone else
            enforce_past: Reject ranges that already started
            background_tasks: Where to queue the confirmation e-mail
            now: Facility-local time override

        Returns:
            The confirmed reservation with court and user loaded

        Raises:
            ValidationError: Bad duration, alignment, hours or past start
            ConflictError: Range overlaps a reservation or maintenance
        """
        owner_id = owner_id or actor.id
        policy.ensure_can_book_for(actor, owner_id)

        if owner_id != actor.id and await db.get(User, owner_id) is None:
            raise NotFoundError(f"User {owner_id} not found")

        court = await self._get_bookable_court(db, data.court_id)
        # Plain value: a rollback below expires the ORM instance
        court_id = court.id
        total_price = self._price_for_range(
            court, data.date, data.start_time, data.end_time, enforce_past, now
        )
        if data.total_price is not None and data.total_price != total_price:
            logger.info(
                f"Ignoring client total {data.total_price} for court {court_id}, computed {total_price}"
            )

        try:
            await self._ensure_range_free(db, court_id, data.date, data.start_time, data.end_time)
        except ConflictError as e:
            logger.warning(
                f"Booking rejected for court {court_id} on {data.date} "
                f"{format_time(data.start_time)}-{format_time(data.end_time)}: {e.detail}"
            )
            await db.rollback()
            raise

        reservation = Reservation(
            user_id=owner_id,
            court_id=court_id,
            date=data.date,
            start_time=data.start_time,
            end_time=data.end_time,
            total_price=total_price,
            status=STATUS_CONFIRMED,
            notes=data.notes,
        )
        db.add(reservation)
        await self._commit(db, "create reservation")

        reservation = await self.get_reservation(db, reservation.id)
        logger.info(
            f"Reservation {reservation.id} confirmed: court {court_id} on {reservation.date} "
            f"{format_time(reservation.start_time)}-{format_time(reservation.end_time)} "
            f"for user {owner_id}, total {total_price}"
        )

        await self._notify(background_tasks, KIND_CONFIRMATION, reservation)
        return reservation

    async def update_reservation(
        self,
        db: AsyncSession,
        actor: User,
        reservation_id: int,
        data: ReservationUpdate,
        background_tasks: Optional[BackgroundTasks] = None,
        now: Optional[datetime] = None,
    ) -> Reservation:
        """
        Change court, date, time or notes of a reservation.

        Administrators may also toggle ``status`` between confirmed and
        cancelled. Re-confirming re-runs the conflict check.

        Raises:
            AuthorizationError: Actor is neither owner nor admin
            ValidationError: Cancelled reservation or out-of-policy range
            ConflictError: New range overlaps another reservation
        """
        reservation = await self.get_reservation(db, reservation_id)
        policy.ensure_can_modify(actor, reservation)

        changes = data.model_dump(exclude_unset=True)
        new_status = changes.pop("status", None)
        if new_status is not None:
            policy.ensure_admin(actor)

        schedule = {field: changes.get(field) or getattr(reservation, field) for field in _SCHEDULE_FIELDS}
        schedule_changed = any(schedule[field] != getattr(reservation, field) for field in _SCHEDULE_FIELDS)

        final_status = new_status or reservation.status
        cancelling = final_status == STATUS_CANCELLED and reservation.status != STATUS_CANCELLED
        reconfirming = final_status == STATUS_CONFIRMED and reservation.status != STATUS_CONFIRMED

        if reservation.status == STATUS_CANCELLED and not reconfirming and schedule_changed:
            raise ValidationError("Cancelled reservations cannot be changed")

        if final_status == STATUS_CONFIRMED and (schedule_changed or reconfirming):
            if schedule["court_id"] != reservation.court_id:
                court = await self._get_bookable_court(db, schedule["court_id"])
            else:
                court = await availability_service.get_court(db, reservation.court_id)

            total_price = self._price_for_range(
                court,
                schedule["date"],
                schedule["start_time"],
                schedule["end_time"],
                enforce_past=not policy.is_admin(actor),
                now=now,
            )

            try:
                await self._ensure_range_free(
                    db,
                    court.id,
                    schedule["date"],
                    schedule["start_time"],
                    schedule["end_time"],
                    exclude_reservation_id=reservation.id,
                )
            except ConflictError as e:
                logger.warning(f"Update of reservation {reservation_id} rejected: {e.detail}")
                await db.rollback()
                raise

            for field, value in schedule.items():
                setattr(reservation, field, value)
            reservation.total_price = total_price
        elif schedule_changed:
            # Cancelled in the same request; a cancelled row blocks nothing.
            for field, value in schedule.items():
                setattr(reservation, field, value)

        if "notes" in changes:
            reservation.notes = changes["notes"]
        reservation.status = final_status

        await self._commit(db, "update reservation")
        reservation = await self.get_reservation(db, reservation_id)

        if cancelling:
            logger.info(f"Reservation {reservation_id} cancelled by admin {actor.id}")
            await self._notify(background_tasks, KIND_CANCELLATION, reservation, REASON_ADMIN)
        elif schedule_changed or reconfirming or "notes" in changes:
            logger.info(f"Reservation {reservation_id} updated by {actor.id}")
            await self._notify(background_tasks, KIND_UPDATE, reservation)

        return reservation

    async def cancel_reservation(
        self,
        db: AsyncSession,
        actor: User,
        reservation_id: int,
        reason: Optional[str] = None,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> Reservation:
        """
        Cancel a reservation, keeping the row for history.

        Args:
            db: Database session
            actor: Owner or admin
            reservation_id: Reservation ID
            reason: Reason shown in the e-mail; defaults by actor role
            background_tasks: Where to queue the cancellation e-mail

        Returns:
            The cancelled reservation
        """
        reservation = await self.get_reservation(db, reservation_id)
        policy.ensure_can_modify(actor, reservation)

        if reservation.status == STATUS_CANCELLED:
            raise ValidationError("Reservation is already cancelled")

        reservation.status = STATUS_CANCELLED
        await self._commit(db, "cancel reservation")
        reservation = await self.get_reservation(db, reservation_id)

        if reason is None:
            reason = REASON_USER if policy.is_owner(actor, reservation) else REASON_ADMIN

        logger.info(f"Reservation {reservation_id} cancelled by {actor.id} ({reason})")
        await self._notify(background_tasks, KIND_CANCELLATION, reservation, reason)
        return reservation

    async def delete_reservation(self, db: AsyncSession, actor: User, reservation_id: int) -> None:
        """Permanently remove a reservation. Admin only, no notification."""
        policy.ensure_admin(actor)
        reservation = await self.get_reservation(db, reservation_id)

        await db.delete(reservation)
        await self._commit(db, "delete reservation")
        logger.info(f"Reservation {reservation_id} deleted by admin {actor.id}")


# Singleton instance
reservation_service = ReservationService()
