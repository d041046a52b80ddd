"""
Seat accounting for rides.

CONCURRENCY STRATEGY: Conditional UPDATE
========================================

Problem:
  Two drivers' approvals (or an approval and an invitation) race for the
  last seat. Both read available_seats=1, both write 0, both succeed.

Solution:
  Never write a value computed in Python. Every change is a single
  statement whose WHERE clause carries the precondition:

    reserve:  UPDATE rides SET available_seats = available_seats - 1
              WHERE id = :ride_id AND available_seats > 0

    release:  UPDATE rides SET available_seats = available_seats + 1
              WHERE id = :ride_id AND available_seats < total_seats

  rowcount == 0 means the precondition did not hold at write time. The
  caller decides whether that is fatal (reserve) or just logged (release).
  Rides with available_seats = NULL (unlimited) never match either clause.

  The statements run inside the request transaction, so a later failure in
  the same request rolls the seat change back with everything else.
"""

import uuid

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.core.logging import get_logger
from carpool.core.metrics import record_seat_operation
from carpool.models.ride import Ride

logger = get_logger(__name__)


async def reserve_seat(db: AsyncSession, ride_id: uuid.UUID) -> bool:
    """Take one seat. Returns False when none is left."""
    result = await db.execute(
        update(Ride)
        .where(
            Ride.id == ride_id,
            Ride.available_seats.is_not(None),
            Ride.available_seats > 0,
        )
        .values(available_seats=Ride.available_seats - 1)
    )

    if result.rowcount == 0:
        record_seat_operation("reserve", "rejected")
        logger.warning("seat_reserve_rejected", ride_id=str(ride_id))
        return False

    record_seat_operation("reserve", "ok")
    logger.info("seat_reserved", ride_id=str(ride_id))
    return True


async def release_seat(db: AsyncSession, ride_id: uuid.UUID) -> bool:
    """Hand one seat back, never beyond total_seats. Returns False if nothing changed."""
    result = await db.execute(
        update(Ride)
        .where(
            Ride.id == ride_id,
            Ride.available_seats.is_not(None),
            Ride.available_seats < Ride.total_seats,
        )
        .values(available_seats=Ride.available_seats + 1)
    )

    if result.rowcount == 0:
        record_seat_operation("release", "rejected")
        logger.warning("seat_release_skipped", ride_id=str(ride_id))
        return False

    record_seat_operation("release", "ok")
    logger.info("seat_released", ride_id=str(ride_id))
    return True
