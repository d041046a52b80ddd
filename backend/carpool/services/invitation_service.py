"""
Driver-initiated bookings.

An invitation holds its seat from the moment it is sent: the seat is
reserved in the same transaction that writes the booking, so if the
reservation fails nothing is persisted at all.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.core.exceptions import (
    AuthorizationError,
    NoSeatsAvailable,
    NotFoundError,
    ValidationError,
)
from carpool.core.logging import get_logger
from carpool.core.metrics import booking_requests
from carpool.domain.booking_messages import build_invitation_message
from carpool.domain.booking_state import BookingStatus
from carpool.models.booking import TripBooking
from carpool.schemas.booking import InvitationCreate
from carpool.services.block_service import is_blocked_between
from carpool.services.conversation_service import notify_participant
from carpool.services.profile_service import ensure_profile_complete, get_profile
from carpool.services.ride_service import get_ride
from carpool.services.seat_service import reserve_seat

logger = get_logger(__name__)


async def create_invitation(
    db: AsyncSession,
    driver_id: uuid.UUID,
    invitation: InvitationCreate,
) -> TripBooking:
    driver = await ensure_profile_complete(db, driver_id, "inviting a rider")

    if invitation.passenger_id == driver_id:
        raise ValidationError("You cannot invite yourself")

    ride = await get_ride(db, invitation.ride_id)
    if ride.driver_id != driver_id:
        raise AuthorizationError("Only the driver for this ride can invite riders")
    if ride.status != "active":
        raise ValidationError("Ride is no longer active")
    if ride.tracks_seats and ride.available_seats <= 0:
        raise NoSeatsAvailable()

    if await get_profile(db, invitation.passenger_id) is None:
        raise NotFoundError("Passenger")
    if await is_blocked_between(db, driver_id, invitation.passenger_id):
        raise AuthorizationError("You cannot invite this user")

    existing = await db.execute(
        select(TripBooking).where(
            TripBooking.ride_id == ride.id,
            TripBooking.passenger_id == invitation.passenger_id,
        )
    )
    booking = existing.scalar_one_or_none()

    if booking is not None:
        if booking.status != BookingStatus.CANCELLED.value:
            raise ValidationError("This rider already has a booking or invitation for this ride")
        booking.status = BookingStatus.INVITED.value
        booking.confirmed_at = None
        booking.pickup_location = invitation.pickup_location
        booking.pickup_time = invitation.pickup_time
        booking.driver_notes = invitation.driver_notes
    else:
        booking = TripBooking(
            ride_id=ride.id,
            driver_id=driver_id,
            passenger_id=invitation.passenger_id,
            status=BookingStatus.INVITED.value,
            pickup_location=invitation.pickup_location,
            pickup_time=invitation.pickup_time,
            driver_notes=invitation.driver_notes,
        )
        db.add(booking)

    await db.flush()

    if ride.tracks_seats and not await reserve_seat(db, ride.id):
        # Raising rolls back the booking written above together with this request
        logger.warning("invitation_seat_reservation_failed", ride_id=str(ride.id))
        raise NoSeatsAvailable()

    await db.refresh(booking)

    booking_requests.labels(kind="invitation").inc()
    logger.info(
        "invitation_created",
        booking_id=str(booking.id),
        ride_id=str(ride.id),
        passenger_id=str(invitation.passenger_id),
        seat_reserved=ride.tracks_seats,
    )

    content = build_invitation_message(driver.display_name or "Driver", ride, invitation.driver_notes)
    await notify_participant(
        db,
        sender_id=driver_id,
        recipient_id=invitation.passenger_id,
        ride_id=ride.id,
        content=content,
        event="invitation",
    )
    return booking
