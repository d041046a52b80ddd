"""
Booking service: passenger requests and the approve/deny/cancel workflow.

TRANSACTION STRATEGY
====================

A booking response touches two rows: the ride's seat counter and the
booking's status. Both writes happen in the request's single transaction:

  1. Resolve the caller's role and the transition (domain.booking_state)
  2. Apply the seat effect
       RESERVE  conditional decrement; no seat -> 400, nothing persisted
       RELEASE  conditional increment inside a SAVEPOINT; a failure is
                logged and the cancellation still goes through
  3. UPDATE the booking WHERE status = <status we read>. If another request
     moved the booking first, rowcount is 0 and we raise, which rolls back
     the seat change from step 2 as well
  4. Notify the other participant inside a SAVEPOINT (best effort)

The notification text is built before any write so that a rolled-back
savepoint can never leave us reading expired ORM state.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from carpool.core.exceptions import (
    AuthorizationError,
    InvalidBookingAction,
    NoSeatsAvailable,
    NotFoundError,
    ValidationError,
)
from carpool.core.logging import get_logger
from carpool.core.metrics import booking_requests, record_transition
from carpool.domain.booking_messages import build_booking_request_message, build_booking_response_message
from carpool.domain.booking_state import (
    BookingAction,
    BookingStatus,
    ParticipantRole,
    SeatEffect,
    resolve_role,
    resolve_transition,
)
from carpool.models.booking import TripBooking
from carpool.schemas.booking import BookingCreate
from carpool.services.block_service import is_blocked_between
from carpool.services.conversation_service import notify_participant
from carpool.services.profile_service import ensure_profile_complete
from carpool.services.ride_service import get_ride
from carpool.services.seat_service import release_seat, reserve_seat

logger = get_logger(__name__)


async def fetch_booking(db: AsyncSession, booking_id: uuid.UUID) -> TripBooking:
    """Load a booking with its ride and both participants' profiles."""
    result = await db.execute(
        select(TripBooking)
        .where(TripBooking.id == booking_id)
        .options(
            selectinload(TripBooking.ride),
            selectinload(TripBooking.driver),
            selectinload(TripBooking.passenger),
        )
        .execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFoundError("Booking")
    return booking


async def _release_seat_best_effort(db: AsyncSession, ride_id: uuid.UUID) -> bool:
    try:
        async with db.begin_nested():
            return await release_seat(db, ride_id)
    except SQLAlchemyError as e:
        logger.error("seat_release_failed", ride_id=str(ride_id), error=str(e))
        return False


async def _apply_status(
    db: AsyncSession,
    booking_id: uuid.UUID,
    previous_status: BookingStatus,
    next_status: BookingStatus,
) -> None:
    confirmed_at = datetime.now(timezone.utc) if next_status == BookingStatus.CONFIRMED else None
    result = await db.execute(
        update(TripBooking)
        .where(TripBooking.id == booking_id, TripBooking.status == previous_status.value)
        .values(status=next_status.value, confirmed_at=confirmed_at)
    )
    if result.rowcount == 0:
        # Someone else moved the booking since we read it
        logger.warning("booking_transition_conflict", booking_id=str(booking_id))
        raise InvalidBookingAction()


async def respond_to_booking(
    db: AsyncSession,
    booking_id: uuid.UUID,
    user_id: uuid.UUID,
    action: BookingAction,
) -> BookingStatus:
    """
    Approve, deny or cancel a booking on behalf of one of its participants.
    Returns the new status.
    """
    action = BookingAction(action)
    await ensure_profile_complete(db, user_id, "responding to a booking request")

    booking = await fetch_booking(db, booking_id)
    role = resolve_role(booking.driver_id, booking.passenger_id, user_id)

    try:
        transition = resolve_transition(role, booking.status, action)
    except InvalidBookingAction:
        record_transition(role.value, action.value, "invalid")
        logger.info(
            "booking_action_rejected",
            booking_id=str(booking_id),
            role=role.value,
            action=action.value,
        )
        raise

    previous_status = BookingStatus(booking.status)
    ride = booking.ride
    ride_id = booking.ride_id
    recipient_id = booking.passenger_id if role == ParticipantRole.DRIVER else booking.driver_id
    content = build_booking_response_message(booking, role, action, previous_status)
    tracks_seats = ride is not None and ride.tracks_seats

    if transition.seat_effect == SeatEffect.RESERVE and tracks_seats:
        if not await reserve_seat(db, ride_id):
            record_transition(role.value, action.value, "no_seats")
            raise NoSeatsAvailable()
    elif transition.seat_effect == SeatEffect.RELEASE and tracks_seats:
        await _release_seat_best_effort(db, ride_id)

    await _apply_status(db, booking_id, previous_status, transition.next_status)

    record_transition(role.value, action.value, "applied")
    logger.info(
        "booking_transitioned",
        booking_id=str(booking_id),
        role=role.value,
        action=action.value,
        from_status=previous_status.value,
        to_status=transition.next_status.value,
        seat_effect=transition.seat_effect.value if tracks_seats else SeatEffect.NONE.value,
    )

    await notify_participant(
        db,
        sender_id=user_id,
        recipient_id=recipient_id,
        ride_id=ride_id,
        content=content,
        event=f"booking_{action.value}",
    )
    return transition.next_status


async def create_booking_request(
    db: AsyncSession,
    passenger_id: uuid.UUID,
    booking_data: BookingCreate,
) -> TripBooking:
    """
    Ask to join a ride. Creates a pending booking, or reopens the passenger's
    cancelled one. No seat is taken until the driver approves.
    """
    passenger = await ensure_profile_complete(db, passenger_id, "booking a ride")
    ride = await get_ride(db, booking_data.ride_id)

    if ride.driver_id == passenger_id:
        raise ValidationError("You cannot book your own ride")
    if ride.status != "active":
        raise ValidationError("Ride is no longer active")
    if ride.tracks_seats and ride.available_seats <= 0:
        logger.warning("booking_failed_no_seats", ride_id=str(ride.id))
        raise NoSeatsAvailable()
    if await is_blocked_between(db, passenger_id, ride.driver_id):
        raise AuthorizationError("You cannot book a ride with this user")

    pickup_time = datetime.combine(booking_data.pickup_date, booking_data.pickup_time, tzinfo=timezone.utc)

    existing = await db.execute(
        select(TripBooking).where(
            TripBooking.ride_id == ride.id,
            TripBooking.passenger_id == passenger_id,
        )
    )
    booking = existing.scalar_one_or_none()

    if booking is not None:
        if booking.status != BookingStatus.CANCELLED.value:
            raise ValidationError("You have already requested to join this ride")
        booking.status = BookingStatus.PENDING.value
        booking.confirmed_at = None
        booking.pickup_location = booking_data.pickup_location
        booking.pickup_time = pickup_time
        booking.passenger_notes = booking_data.passenger_notes
        reopened = True
    else:
        booking = TripBooking(
            ride_id=ride.id,
            driver_id=ride.driver_id,
            passenger_id=passenger_id,
            status=BookingStatus.PENDING.value,
            pickup_location=booking_data.pickup_location,
            pickup_time=pickup_time,
            passenger_notes=booking_data.passenger_notes,
        )
        db.add(booking)
        reopened = False

    await db.flush()
    await db.refresh(booking)

    booking_requests.labels(kind="request").inc()
    logger.info(
        "booking_requested",
        booking_id=str(booking.id),
        ride_id=str(ride.id),
        passenger_id=str(passenger_id),
        reopened=reopened,
    )

    content = build_booking_request_message(
        passenger.display_name or "Passenger",
        ride,
        booking_data.pickup_date,
        booking_data.pickup_time,
        booking_data.passenger_notes,
    )
    await notify_participant(
        db,
        sender_id=passenger_id,
        recipient_id=ride.driver_id,
        ride_id=ride.id,
        content=content,
        event="booking_request",
    )
    return booking


async def get_user_bookings(
    db: AsyncSession,
    user_id: uuid.UUID,
    status: Optional[BookingStatus] = None,
) -> list[TripBooking]:
    """Bookings where the user is the driver or the passenger, newest first."""
    query = select(TripBooking).where(
        or_(TripBooking.driver_id == user_id, TripBooking.passenger_id == user_id)
    )
    if status is not None:
        query = query.where(TripBooking.status == status.value)

    result = await db.execute(query.order_by(TripBooking.created_at.desc()))
    return list(result.scalars().all())
