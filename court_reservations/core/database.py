"""Database engine, session factory and declarative base."""
import hashlib
import logging
from datetime import date, timedelta
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from court_reservations.core.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for a database URL.

    SQLite has no row or advisory locks, so every transaction there starts
    with BEGIN IMMEDIATE and writers are serialized by the database file lock.

    Args:
        database_url: SQLAlchemy URL (asyncpg or aiosqlite driver)
        echo: Log emitted SQL

    Returns:
        Configured AsyncEngine
    """
    if database_url.startswith("sqlite"):
        engine = create_async_engine(
            database_url,
            echo=echo,
            connect_args={"timeout": 15},
        )

        @event.listens_for(engine.sync_engine, "connect")
        def _disable_driver_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine.sync_engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

        return engine

    return create_async_engine(database_url, echo=echo, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a request-scoped database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_models(bind: AsyncEngine = engine) -> None:
    """Create tables that do not exist yet."""
    import court_reservations.models  # noqa: F401  registers tables on Base.metadata

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def court_day_lock_key(court_id: int, target_date: date) -> int:
    """Stable signed 64-bit advisory lock key for a (court, date) pair."""
    digest = hashlib.sha256(f"{court_id}:{target_date.isoformat()}".encode()).digest()
    return int.from_bytes(digest[:8], "big", signed=True)


async def lock_court_day(db: AsyncSession, court_id: int, target_date: date) -> None:
    """
    Serialize bookings for one court and day until the transaction ends.

    PostgreSQL takes a transaction-scoped advisory lock. Other dialects rely
    on the transaction mode configured in build_engine.
    """
    if db.get_bind().dialect.name == "postgresql":
        await db.execute(
            text("SELECT pg_advisory_xact_lock(:key)"),
            {"key": court_day_lock_key(court_id, target_date)},
        )
    else:
        # Opens the transaction so the BEGIN IMMEDIATE write lock is held.
        await db.execute(text("SELECT 1"))


async def lock_court_days(db: AsyncSession, court_id: int, start_date: date, end_date: date) -> None:
    """Take the per-day booking lock for every date in an inclusive range, in date order."""
    current = start_date
    while current <= end_date:
        await lock_court_day(db, court_id, current)
        current += timedelta(days=1)
