"""
Reviews of completed trips.

A participant of a completed booking may leave one review of the other
participant once the ride has departed. The reviewer's role comes from
their side of the booking.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.core.exceptions import AuthorizationError, ValidationError
from carpool.core.logging import get_logger
from carpool.core.metrics import reviews_created
from carpool.domain.booking_state import BookingStatus, ParticipantRole, resolve_role
from carpool.models.review import Review
from carpool.schemas.review import ReviewCreate
from carpool.services.booking_service import fetch_booking
from carpool.services.profile_service import ensure_profile_complete

logger = get_logger(__name__)

MIN_COMMENT_WORDS = 5


def validate_review_input(rating: int, comment: str) -> None:
    if not 1 <= rating <= 5:
        raise ValidationError("Rating must be between 1 and 5")
    if len(comment.split()) < MIN_COMMENT_WORDS:
        raise ValidationError(f"Comment must be at least {MIN_COMMENT_WORDS} words")


async def create_review(db: AsyncSession, reviewer_id: uuid.UUID, data: ReviewCreate) -> Review:
    await ensure_profile_complete(db, reviewer_id, "leaving reviews")
    validate_review_input(data.rating, data.comment)

    booking = await fetch_booking(db, data.booking_id)
    if reviewer_id not in (booking.driver_id, booking.passenger_id):
        raise AuthorizationError("You can only review trips you participated in")
    if booking.status != BookingStatus.COMPLETED.value:
        raise ValidationError("You can only review completed trips")

    ride = booking.ride
    departure = datetime.combine(ride.departure_date, ride.departure_time, tzinfo=timezone.utc)
    if departure > datetime.now(timezone.utc):
        raise ValidationError("You cannot review a trip that hasn't happened yet")

    reviewer_role = resolve_role(booking.driver_id, booking.passenger_id, reviewer_id)
    if reviewer_role == ParticipantRole.DRIVER:
        reviewee_id, reviewed_role = booking.passenger_id, ParticipantRole.PASSENGER
    else:
        reviewee_id, reviewed_role = booking.driver_id, ParticipantRole.DRIVER

    existing = await db.execute(
        select(Review.id).where(Review.booking_id == booking.id, Review.reviewer_id == reviewer_id)
    )
    if existing.scalar_one_or_none() is not None:
        raise ValidationError("You have already reviewed this trip")

    review = Review(
        booking_id=booking.id,
        reviewer_id=reviewer_id,
        reviewee_id=reviewee_id,
        reviewer_role=reviewer_role.value,
        reviewed_role=reviewed_role.value,
        rating=data.rating,
        comment=data.comment.strip(),
    )
    try:
        async with db.begin_nested():
            db.add(review)
    except IntegrityError:
        # A concurrent request for the same trip got there first
        raise ValidationError("You have already reviewed this trip")
    await db.refresh(review)

    reviews_created.labels(reviewer_role=review.reviewer_role).inc()
    logger.info(
        "review_created",
        review_id=str(review.id),
        booking_id=str(booking.id),
        reviewer_role=review.reviewer_role,
        rating=review.rating,
    )
    return review


async def list_reviews(
    db: AsyncSession,
    reviewee_id: Optional[uuid.UUID] = None,
    limit: int = 50,
    offset: int = 0,
) -> list[Review]:
    """Newest first, optionally only the reviews received by one member."""
    query = select(Review)
    if reviewee_id is not None:
        query = query.where(Review.reviewee_id == reviewee_id)
    result = await db.execute(query.order_by(Review.created_at.desc()).offset(offset).limit(limit))
    return list(result.scalars().all())
