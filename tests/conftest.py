"""Shared fixtures: a throwaway SQLite database, seeded users and courts, and an API client."""
import os
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Settings are read at import time
os.environ.setdefault("EMAIL_ENABLED", "false")

from court_reservations.core.database import build_engine, get_db, init_models  # noqa: E402
from court_reservations.main import app  # noqa: E402
from court_reservations.models import Court, Reservation, User  # noqa: E402
from court_reservations.models.reservation import STATUS_CONFIRMED  # noqa: E402
from court_reservations.services.notification_service import notification_service  # noqa: E402
from helpers import ADMIN_ID, OTHER_ID, OWNER_ID, RecordingEmailClient  # noqa: E402


@pytest_asyncio.fixture
async def engine(tmp_path):
    # A file, not :memory:, so concurrent sessions share one database
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'reservations.db'}")
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def seed(session_factory):
    """Three users and three courts; returns the court ids."""
    async with session_factory() as session:
        session.add_all(
            [
                User(id=OWNER_ID, email="owner@example.com", first_name="Olivia", last_name="Owner"),
                User(id=OTHER_ID, email="other@example.com", first_name="Oscar"),
                User(id=ADMIN_ID, email="admin@example.com", first_name="Ada", is_admin=True),
            ]
        )
        center = Court(name="Court 1", hourly_rate=Decimal("20.00"))
        side = Court(name="Court 2", hourly_rate=Decimal("15.00"))
        closed = Court(name="Court 3", hourly_rate=Decimal("20.00"), is_active=False)
        session.add_all([center, side, closed])
        await session.commit()

        return {"court": center.id, "side_court": side.id, "closed_court": closed.id}


@pytest_asyncio.fixture
async def db(session_factory, seed):
    """Session for service-level tests. Do not mix with the API client in one test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def emails(monkeypatch):
    client = RecordingEmailClient()
    monkeypatch.setattr(notification_service, "client", client)
    return client


@pytest_asyncio.fixture
async def client(session_factory, seed, emails):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def add_reservation(session_factory, seed):
    """Insert a reservation directly, bypassing booking rules (e.g. for past dates)."""

    async def _add(start, end, on=date(2025, 6, 10), user_id=OWNER_ID, court_id=None, status=STATUS_CONFIRMED):
        async with session_factory() as session:
            reservation = Reservation(
                user_id=user_id,
                court_id=court_id or seed["court"],
                date=on,
                start_time=start,
                end_time=end,
                total_price=Decimal("20.00"),
                status=status,
            )
            session.add(reservation)
            await session.commit()
            return reservation.id

    return _add


@pytest.fixture
def reservation_status(session_factory):
    async def _status(reservation_id):
        async with session_factory() as session:
            reservation = await session.get(Reservation, reservation_id)
            return reservation.status if reservation else None

    return _status
