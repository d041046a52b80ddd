"""
Trip booking: a passenger's seat request or a driver's invitation.

Key design decisions:
- One row per (ride, passenger); a cancelled row is reopened on re-request
- Status field keeps history instead of deleting rows
- driver_id is copied from the ride so role checks need no join
"""

import uuid

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    String,
    Uuid,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from carpool.db.base import Base, TimestampMixin


class TripBooking(Base, TimestampMixin):
    __tablename__ = "trip_bookings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    ride_id = Column(Uuid, ForeignKey("rides.id", ondelete="CASCADE"), nullable=False, index=True)
    driver_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    passenger_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")
    pickup_location = Column(String(100), nullable=True)
    pickup_time = Column(DateTime(timezone=True), nullable=True)
    driver_notes = Column(String(500), nullable=True)
    passenger_notes = Column(String(500), nullable=True)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)

    ride = relationship("Ride", lazy="raise")
    driver = relationship("Profile", foreign_keys=[driver_id], lazy="raise")
    passenger = relationship("Profile", foreign_keys=[passenger_id], lazy="raise")

    __table_args__ = (
        UniqueConstraint("ride_id", "passenger_id", name="uq_ride_passenger_booking"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed', 'invited')",
            name="check_booking_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<TripBooking(id={self.id}, ride={self.ride_id}, passenger={self.passenger_id}, status={self.status})>"
