"""
Vehicles a member has registered.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.core.logging import get_logger
from carpool.models.vehicle import Vehicle
from carpool.schemas.vehicle import VehicleCreate
from carpool.services.profile_service import ensure_profile_complete

logger = get_logger(__name__)


async def list_vehicles(db: AsyncSession, owner_id: uuid.UUID) -> list[Vehicle]:
    result = await db.execute(
        select(Vehicle).where(Vehicle.owner_id == owner_id).order_by(Vehicle.created_at.desc())
    )
    return list(result.scalars().all())


async def add_vehicle(db: AsyncSession, owner_id: uuid.UUID, data: VehicleCreate) -> Vehicle:
    await ensure_profile_complete(db, owner_id, "adding vehicles")

    vehicle = Vehicle(owner_id=owner_id, **data.model_dump())
    db.add(vehicle)
    await db.flush()
    await db.refresh(vehicle)

    logger.info("vehicle_added", vehicle_id=str(vehicle.id), owner_id=str(owner_id))
    return vehicle
