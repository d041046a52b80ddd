"""
Pytest fixtures for test database, client, and authentication.

Every test gets a fresh in-memory SQLite schema. The app's get_db is
overridden with the test session, committing on success and rolling back
on error exactly like the real dependency. A rollback expires every object
loaded in the shared session, so tests that expect an error response should
capture ids up front and refresh fixtures afterwards.
"""

import os

# Must be set before carpool is imported: settings and the engine are built at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["REDIS_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"

import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from carpool.main import app
from carpool.db.base import Base
from carpool.db.session import commit_and_run_hooks, get_db, rollback_and_discard_hooks
from carpool.core.security import create_access_token
from carpool.models import Profile, Ride, TripBooking

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def _enable_savepoints(engine) -> None:
    """The sqlite3 driver's implicit transactions break SAVEPOINT; let SQLAlchemy emit BEGIN."""

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database per test, on one shared connection."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    _enable_savepoints(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        try:
            yield db_session
            await commit_and_run_hooks(db_session)
        except Exception:
            await rollback_and_discard_hooks(db_session)
            raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def bearer(user_id: uuid.UUID) -> dict:
    """Authorization headers for a user, signed like the identity provider's tokens."""
    return {"Authorization": f"Bearer {create_access_token(data={'sub': str(user_id)})}"}


async def _create_profile(db: AsyncSession, first_name, last_name=None) -> Profile:
    profile = Profile(id=uuid.uuid4(), first_name=first_name, last_name=last_name)
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


@pytest.fixture
def auth_headers_for():
    return bearer


@pytest_asyncio.fixture
async def driver(db_session: AsyncSession) -> Profile:
    return await _create_profile(db_session, "Dana", "Driver")


@pytest_asyncio.fixture
async def passenger(db_session: AsyncSession) -> Profile:
    return await _create_profile(db_session, "Pat", "Rider")


@pytest_asyncio.fixture
async def outsider(db_session: AsyncSession) -> Profile:
    return await _create_profile(db_session, "Olive")


@pytest_asyncio.fixture
async def driver_headers(driver: Profile) -> dict:
    return bearer(driver.id)


@pytest_asyncio.fixture
async def passenger_headers(passenger: Profile) -> dict:
    return bearer(passenger.id)


@pytest_asyncio.fixture
async def outsider_headers(outsider: Profile) -> dict:
    return bearer(outsider.id)


@pytest.fixture
def make_ride(db_session: AsyncSession, driver: Profile):
    """Factory for a ride owned by `driver`, a week out by default. available_seats=None means untracked."""

    async def _make(
        available_seats=2, total_seats=4, status="active", title="Hood River Run", departure_date=None
    ) -> Ride:
        ride = Ride(
            driver_id=driver.id,
            title=title,
            start_location="Hood River",
            end_location="Portland",
            departure_date=departure_date or date.today() + timedelta(days=7),
            departure_time=time(9, 30),
            total_seats=total_seats,
            available_seats=available_seats,
            price_per_seat=10,
            status=status,
        )
        db_session.add(ride)
        await db_session.commit()
        await db_session.refresh(ride)
        return ride

    return _make


@pytest.fixture
def make_booking(db_session: AsyncSession, passenger: Profile):
    """Factory for a booking row in any status, written directly."""

    async def _make(ride: Ride, status: str, passenger_id=None) -> TripBooking:
        booking = TripBooking(
            ride_id=ride.id,
            driver_id=ride.driver_id,
            passenger_id=passenger_id or passenger.id,
            status=status,
            pickup_location="Main St Park & Ride",
            pickup_time=datetime.combine(ride.departure_date, time(9, 15), tzinfo=timezone.utc),
        )
        db_session.add(booking)
        await db_session.commit()
        await db_session.refresh(booking)
        return booking

    return _make
