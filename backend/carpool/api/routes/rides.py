"""
Ride endpoints with Redis caching on the public listing.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.db.session import get_db
from carpool.schemas.ride import RideCreate, RideDeletedResponse, RideListResponse, RideResponse, RideUpdate
from carpool.services.ride_service import create_ride, delete_ride, get_ride, list_active_rides, update_ride
from carpool.services.cache_service import get_cached_rides, set_cached_rides, invalidate_after_commit
from carpool.core.security import get_current_user_id
from carpool.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/rides", tags=["Rides"])


@router.post("/", response_model=RideResponse, status_code=status.HTTP_201_CREATED)
async def create_ride_endpoint(
    ride_data: RideCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Post a ride as its driver."""
    ride = await create_ride(db, ride_data, user_id)
    invalidate_after_commit(db)
    return ride


@router.get("/", response_model=RideListResponse)
async def list_rides_endpoint(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Upcoming active rides.
    Cached in Redis briefly; any seat or status change invalidates the cache.
    """
    cached = await get_cached_rides(page, page_size)
    if cached:
        logger.info("rides_list_cache_hit", page=page)
        cached["cached"] = True
        return RideListResponse(**cached)

    rides, total = await list_active_rides(db, page, page_size)
    response_data = {
        "rides": [RideResponse.model_validate(r).model_dump(mode="json") for r in rides],
        "total": total,
        "page": page,
        "page_size": page_size,
        "cached": False,
    }
    await set_cached_rides(page, page_size, response_data)

    return RideListResponse(**response_data)


@router.get("/{ride_id}", response_model=RideResponse)
async def get_ride_endpoint(
    ride_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Single ride with live seat counts. Not cached."""
    return await get_ride(db, ride_id)


@router.patch("/{ride_id}", response_model=RideResponse)
async def update_ride_endpoint(
    ride_id: uuid.UUID,
    ride_data: RideUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Edit a ride. Driver only."""
    ride = await update_ride(db, ride_id, user_id, ride_data)
    invalidate_after_commit(db)
    return ride


@router.delete("/{ride_id}", response_model=RideDeletedResponse)
async def delete_ride_endpoint(
    ride_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Remove a ride and its bookings. Driver only."""
    await delete_ride(db, ride_id, user_id)
    invalidate_after_commit(db)
    return RideDeletedResponse()
