"""
Vehicle endpoints for the caller's own vehicles.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.db.session import get_db
from carpool.schemas.vehicle import VehicleCreate, VehicleResponse
from carpool.services.vehicle_service import add_vehicle, list_vehicles
from carpool.core.security import get_current_user_id

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


@router.get("/", response_model=list[VehicleResponse])
async def list_vehicles_endpoint(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await list_vehicles(db, user_id)


@router.post("/", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def add_vehicle_endpoint(
    body: VehicleCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Register a vehicle. Requires a complete profile."""
    return await add_vehicle(db, user_id, body)
