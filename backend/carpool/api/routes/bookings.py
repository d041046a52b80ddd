"""
Booking endpoints: join requests and the approve/deny/cancel workflow.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.db.session import get_db
from carpool.domain.booking_state import BookingStatus
from carpool.schemas.booking import (
    BookingActionRequest,
    BookingActionResponse,
    BookingCreate,
    BookingResponse,
)
from carpool.services.booking_service import create_booking_request, get_user_bookings, respond_to_booking
from carpool.services.cache_service import invalidate_after_commit
from carpool.core.security import get_current_user_id

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Ask to join a ride.

    Creates a pending request (or reopens a cancelled one) and messages the
    driver. No seat is taken until the driver approves.
    """
    return await create_booking_request(db, user_id, booking_data)


@router.patch("/{booking_id}", response_model=BookingActionResponse)
async def update_booking_status(
    booking_id: uuid.UUID,
    body: BookingActionRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Approve, deny or cancel a booking.

    Drivers approve or deny requests and can withdraw their invitations;
    passengers accept or decline invitations and can cancel their requests.
    """
    next_status = await respond_to_booking(db, booking_id, user_id, body.action)
    # Seat counts may have changed
    invalidate_after_commit(db)
    return BookingActionResponse(success=True, status=next_status.value)


@router.get("/", response_model=list[BookingResponse])
async def list_user_bookings(
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Bookings where the caller is the driver or the passenger."""
    return await get_user_bookings(db, user_id, booking_status)
