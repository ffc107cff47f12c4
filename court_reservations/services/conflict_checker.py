"""Overlap tests against confirmed reservations."""
import logging
from datetime import date, time as dt_time
from typing import List, Optional

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from court_reservations.models.reservation import Reservation, STATUS_CONFIRMED

logger = logging.getLogger(__name__)


def overlaps(start_a: dt_time, end_a: dt_time, start_b: dt_time, end_b: dt_time) -> bool:
    """Half-open interval overlap: [start_a, end_a) and [start_b, end_b)."""
    return start_a < end_b and start_b < end_a


async def find_conflicts(
    db: AsyncSession,
    court_id: int,
    target_date: date,
    start_time: dt_time,
    end_time: dt_time,
    exclude_reservation_id: Optional[int] = None,
) -> List[Reservation]:
    """
    Return confirmed reservations on a court and date overlapping a range.

    Args:
        db: Database session
        court_id: Court ID
        target_date: Facility-local date
        start_time: Proposed start
        end_time: Proposed end
        exclude_reservation_id: Reservation being edited, ignored in the scan

    Returns:
        Overlapping reservations, ordered by start time
    """
    conditions = [
        Reservation.court_id == court_id,
        Reservation.date == target_date,
        Reservation.status == STATUS_CONFIRMED,
    ]
    if exclude_reservation_id is not None:
        conditions.append(Reservation.id != exclude_reservation_id)

    result = await db.execute(
        select(Reservation).where(and_(*conditions)).order_by(Reservation.start_time)
    )
    candidates = result.scalars().all()

    return [
        reservation
        for reservation in candidates
        if overlaps(start_time, end_time, reservation.start_time, reservation.end_time)
    ]


async def has_conflict(
    db: AsyncSession,
    court_id: int,
    target_date: date,
    start_time: dt_time,
    end_time: dt_time,
    exclude_reservation_id: Optional[int] = None,
) -> bool:
    """True if the range overlaps any other confirmed reservation."""
    conflicts = await find_conflicts(
        db, court_id, target_date, start_time, end_time, exclude_reservation_id
    )
    if conflicts:
        logger.debug(
            f"Court {court_id} {target_date}: {start_time}-{end_time} conflicts with "
            f"reservations {[r.id for r in conflicts]}"
        )
    return bool(conflicts)
