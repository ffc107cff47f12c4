"""Availability service: occupied ranges and the display slot grid."""
import logging
from typing import List, Optional
from datetime import date, datetime, time as dt_time
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from court_reservations.core.clock import facility_now
from court_reservations.core.config import settings
from court_reservations.core.exceptions import NotFoundError
from court_reservations.models.court import Court
from court_reservations.models.maintenance_period import MaintenancePeriod
from court_reservations.models.reservation import Reservation, STATUS_CONFIRMED
from court_reservations.schemas.availability import (
    AvailabilityEntry,
    TimeSlot,
    SlotGridResponse,
)
from court_reservations.services.conflict_checker import overlaps
from court_reservations.services.slot_grid import generate_slots

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Service for resolving what is occupied on a court."""

    async def get_court(self, db: AsyncSession, court_id: int) -> Court:
        result = await db.execute(select(Court).where(Court.id == court_id))
        court = result.scalar_one_or_none()

        if not court:
            raise NotFoundError(f"Court {court_id} not found")

        return court

    async def get_maintenance_for_date(
        self, db: AsyncSession, court_id: int, target_date: date
    ) -> List[MaintenancePeriod]:
        """Maintenance periods on a court whose date range contains a date."""
        result = await db.execute(
            select(MaintenancePeriod)
            .where(
                and_(
                    MaintenancePeriod.court_id == court_id,
                    MaintenancePeriod.start_date <= target_date,
                    MaintenancePeriod.end_date >= target_date,
                )
            )
            .order_by(MaintenancePeriod.start_time)
        )
        return list(result.scalars().all())

    async def get_availability(
        self, db: AsyncSession, court_id: int, target_date: date
    ) -> List[AvailabilityEntry]:
        """
        Get occupied ranges for a court on a date.

        One entry per confirmed reservation and one per maintenance period
        applying to the date. Overlapping entries are not merged.

        Args:
            db: Database session
            court_id: Court ID
            target_date: Facility-local date

        Returns:
            Entries ordered by start time
        """
        result = await db.execute(
            select(Reservation.start_time, Reservation.end_time)
            .where(
                and_(
                    Reservation.court_id == court_id,
                    Reservation.date == target_date,
                    Reservation.status == STATUS_CONFIRMED,
                )
            )
            .order_by(Reservation.start_time)
        )
        entries = [
            AvailabilityEntry(start_time=row.start_time, end_time=row.end_time, type="reservation")
            for row in result.all()
        ]

        for period in await self.get_maintenance_for_date(db, court_id, target_date):
            entries.append(
                AvailabilityEntry(
                    start_time=period.start_time,
                    end_time=period.end_time,
                    type="maintenance",
                    maintenance_type=period.type,
                )
            )

        # Stable sort keeps reservations ahead of maintenance on equal starts
        entries.sort(key=lambda entry: entry.start_time)
        return entries

    async def find_maintenance_overlap(
        self,
        db: AsyncSession,
        court_id: int,
        target_date: date,
        start_time: dt_time,
        end_time: dt_time,
    ) -> Optional[MaintenancePeriod]:
        """First maintenance period blocking a range, if any."""
        for period in await self.get_maintenance_for_date(db, court_id, target_date):
            if overlaps(start_time, end_time, period.start_time, period.end_time):
                return period
        return None

    def project_slots(
        self,
        target_date: date,
        entries: List[AvailabilityEntry],
        now: datetime,
    ) -> List[TimeSlot]:
        """
        Project availability entries onto the operating-hours grid.

        Args:
            target_date: Facility-local date
            entries: Output of get_availability
            now: Current facility-local time

        Returns:
            One TimeSlot per grid slot
        """
        opening, closing = settings.operating_hours_for(target_date)
        local_now = now.replace(tzinfo=None)

        slots = []
        for slot in generate_slots(opening, closing, settings.SLOT_MINUTES):
            reserved = any(
                entry.type == "reservation"
                and overlaps(slot.start_time, slot.end_time, entry.start_time, entry.end_time)
                for entry in entries
            )
            maintenance = next(
                (
                    entry
                    for entry in entries
                    if entry.type == "maintenance"
                    and overlaps(slot.start_time, slot.end_time, entry.start_time, entry.end_time)
                ),
                None,
            )
            slots.append(
                TimeSlot(
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    is_reserved=reserved,
                    is_maintenance=maintenance is not None,
                    maintenance_type=maintenance.maintenance_type if maintenance else None,
                    is_past=datetime.combine(target_date, slot.start_time) <= local_now,
                )
            )

        return slots

    async def get_slot_grid(
        self,
        db: AsyncSession,
        court_id: int,
        target_date: date,
        now: Optional[datetime] = None,
    ) -> SlotGridResponse:
        """Get the display grid for a court and date."""
        await self.get_court(db, court_id)
        entries = await self.get_availability(db, court_id, target_date)
        opening, closing = settings.operating_hours_for(target_date)

        return SlotGridResponse(
            court_id=court_id,
            date=target_date,
            opening_time=opening,
            closing_time=closing,
            slots=self.project_slots(target_date, entries, now or facility_now()),
        )


# Singleton instance
availability_service = AvailabilityService()
