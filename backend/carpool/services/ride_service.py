"""
Ride service handling CRUD operations.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from carpool.core.logging import get_logger
from carpool.models.ride import Ride
from carpool.schemas.ride import RideCreate, RideUpdate
from carpool.services.profile_service import ensure_profile_complete

logger = get_logger(__name__)


async def create_ride(db: AsyncSession, ride_data: RideCreate, driver_id: uuid.UUID) -> Ride:
    """Post a ride. All seats start available unless the driver does not track seats."""
    await ensure_profile_complete(db, driver_id, "posting a ride")

    departure = datetime.combine(ride_data.departure_date, ride_data.departure_time, tzinfo=timezone.utc)
    if departure <= datetime.now(timezone.utc):
        raise ValidationError("Departure must be in the future")

    ride = Ride(
        driver_id=driver_id,
        title=ride_data.title,
        start_location=ride_data.start_location,
        end_location=ride_data.end_location,
        departure_date=ride_data.departure_date,
        departure_time=ride_data.departure_time,
        total_seats=ride_data.total_seats,
        available_seats=ride_data.total_seats if ride_data.track_seats else None,
        price_per_seat=ride_data.price_per_seat,
        description=ride_data.description,
        status="active",
    )
    db.add(ride)
    await db.flush()
    await db.refresh(ride)

    logger.info("ride_created", ride_id=str(ride.id), driver_id=str(driver_id), seats=ride.available_seats)
    return ride


async def get_ride(db: AsyncSession, ride_id: uuid.UUID) -> Ride:
    """Get a single ride with live seat counts."""
    result = await db.execute(
        select(Ride).where(Ride.id == ride_id).execution_options(populate_existing=True)
    )
    ride = result.scalar_one_or_none()

    if not ride:
        raise NotFoundError("Ride")
    return ride


async def list_active_rides(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Ride], int]:
    """Active rides departing today or later, soonest first."""
    today = datetime.now(timezone.utc).date()
    query = select(Ride).where(Ride.status == "active", Ride.departure_date >= today)

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar()

    rides_query = (
        query
        .order_by(Ride.departure_date.asc(), Ride.departure_time.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(rides_query)
    return list(result.scalars().all()), total


async def update_ride(
    db: AsyncSession,
    ride_id: uuid.UUID,
    user_id: uuid.UUID,
    ride_data: RideUpdate,
) -> Ride:
    """Driver-only edits. Seat edits must keep available_seats within [0, total_seats]."""
    ride = await get_ride(db, ride_id)
    if ride.driver_id != user_id:
        raise AuthorizationError("Only the driver can edit this ride")

    changes = ride_data.model_dump(exclude_unset=True)
    total_seats = changes.get("total_seats", ride.total_seats)
    available_seats = changes.get("available_seats", ride.available_seats)
    if available_seats is not None and available_seats > total_seats:
        raise ValidationError("available_seats cannot exceed total_seats")

    for field, value in changes.items():
        setattr(ride, field, value)

    await db.flush()
    await db.refresh(ride)

    logger.info("ride_updated", ride_id=str(ride.id), fields=sorted(changes))
    return ride


async def delete_ride(db: AsyncSession, ride_id: uuid.UUID, user_id: uuid.UUID) -> None:
    """Driver-only. The ride's bookings go with it through the foreign key cascade."""
    ride = await get_ride(db, ride_id)
    if ride.driver_id != user_id:
        raise AuthorizationError("Only the driver can delete this ride")

    await db.execute(delete(Ride).where(Ride.id == ride_id))
    logger.info("ride_deleted", ride_id=str(ride_id), driver_id=str(user_id))
