from datetime import date, datetime, time
from decimal import Decimal

import pytest

from court_reservations.core.exceptions import AuthorizationError, ConflictError, ValidationError
from court_reservations.models.user import User
from court_reservations.schemas.reservation import ReservationCreate, ReservationUpdate
from court_reservations.services.reservation_service import reservation_service
from helpers import ADMIN_ID, OTHER_ID, OWNER_ID

DAY = date(2025, 6, 10)
MORNING_OF_DAY = datetime(2025, 6, 10, 8, 15)


async def _book(db, user_id, court_id, start, end, **kwargs):
    actor = await db.get(User, user_id)
    data = ReservationCreate(court_id=court_id, date=DAY, start_time=start, end_time=end)
    return await reservation_service.create_reservation(db, actor, data, now=MORNING_OF_DAY, **kwargs)


@pytest.mark.asyncio
async def test_create_with_injected_clock(db, seed, emails):
    reservation = await _book(db, OWNER_ID, seed["court"], time(9, 0), time(10, 30))

    assert reservation.id
    assert reservation.total_price == Decimal("30.00")
    assert emails.subjects_for("owner@example.com")


@pytest.mark.asyncio
async def test_slot_already_started_is_rejected(db, seed, emails):
    with pytest.raises(ValidationError):
        await _book(db, OWNER_ID, seed["court"], time(8, 0), time(9, 0))


@pytest.mark.asyncio
async def test_self_edit_to_same_range_never_conflicts(db, seed, emails):
    reservation = await _book(db, OWNER_ID, seed["court"], time(9, 0), time(10, 0))
    owner = await db.get(User, OWNER_ID)

    updated = await reservation_service.update_reservation(
        db,
        owner,
        reservation.id,
        ReservationUpdate(court_id=seed["court"], date=DAY, start_time=time(9, 0), end_time=time(10, 0)),
        now=MORNING_OF_DAY,
    )

    assert updated.start_time == time(9, 0)


@pytest.mark.asyncio
async def test_second_booking_conflicts(db, seed, emails):
    await _book(db, OWNER_ID, seed["court"], time(9, 0), time(10, 0))

    with pytest.raises(ConflictError):
        await _book(db, OTHER_ID, seed["court"], time(9, 30), time(10, 30))


@pytest.mark.asyncio
async def test_only_admins_book_for_others(db, seed, emails):
    owner = await db.get(User, OWNER_ID)
    admin = await db.get(User, ADMIN_ID)
    data = ReservationCreate(court_id=seed["court"], date=DAY, start_time=time(12, 0), end_time=time(13, 0))

    with pytest.raises(AuthorizationError):
        await reservation_service.create_reservation(db, owner, data, owner_id=OTHER_ID, now=MORNING_OF_DAY)

    reservation = await reservation_service.create_reservation(
        db, admin, data, owner_id=OTHER_ID, now=MORNING_OF_DAY
    )
    assert reservation.user_id == OTHER_ID


@pytest.mark.asyncio
async def test_update_moves_range_as_time_values(db, seed, emails):
    reservation = await _book(db, OWNER_ID, seed["court"], time(9, 0), time(10, 0))
    owner = await db.get(User, OWNER_ID)

    updated = await reservation_service.update_reservation(
        db,
        owner,
        reservation.id,
        ReservationUpdate.model_validate({"startTime": "09:30", "endTime": "11:00"}),
        now=MORNING_OF_DAY,
    )

    assert isinstance(updated.start_time, time)
    assert (updated.start_time, updated.end_time) == (time(9, 30), time(11, 0))
    assert updated.total_price == Decimal("30.00")


@pytest.mark.asyncio
async def test_conflicting_update_leaves_reservation_unchanged(db, seed, emails):
    await _book(db, OTHER_ID, seed["court"], time(12, 0), time(13, 0))
    reservation = await _book(db, OWNER_ID, seed["court"], time(9, 0), time(10, 0))
    reservation_id = reservation.id
    owner = await db.get(User, OWNER_ID)

    with pytest.raises(ConflictError) as excinfo:
        await reservation_service.update_reservation(
            db,
            owner,
            reservation_id,
            ReservationUpdate(start_time=time(11, 30), end_time=time(12, 30)),
            now=MORNING_OF_DAY,
        )

    assert excinfo.value.detail == "Time slot is already reserved"
    reloaded = await reservation_service.get_reservation(db, reservation_id)
    assert reloaded.start_time == time(9, 0)


@pytest.mark.asyncio
async def test_session_is_usable_after_rejected_booking(db, seed, emails):
    await _book(db, OWNER_ID, seed["court"], time(9, 0), time(10, 0))

    with pytest.raises(ConflictError):
        await _book(db, OTHER_ID, seed["court"], time(9, 0), time(10, 0))

    reservation = await _book(db, OTHER_ID, seed["court"], time(10, 0), time(11, 0))
    assert reservation.user_id == OTHER_ID
