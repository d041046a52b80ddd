"""
Ride model with seat inventory tracking.

Key design decisions:
- `available_seats` NULL means the driver does not track seats (unlimited)
- When tracked it is only changed through conditional UPDATEs in seat_service
- CHECK constraints keep it within [0, total_seats] as the final safety net
"""

import uuid

from sqlalchemy import (
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Time,
    Uuid,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from carpool.db.base import Base, TimestampMixin


class Ride(Base, TimestampMixin):
    __tablename__ = "rides"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    driver_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    title = Column(String(100), nullable=True)
    start_location = Column(String(100), nullable=False)
    end_location = Column(String(100), nullable=False)
    departure_date = Column(Date, nullable=False)
    departure_time = Column(Time, nullable=False)
    total_seats = Column(Integer, nullable=False, default=1)
    available_seats = Column(Integer, nullable=True)
    price_per_seat = Column(Numeric(10, 2), nullable=False, default=0)
    description = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default="active")

    driver = relationship("Profile", back_populates="rides", lazy="raise")

    __table_args__ = (
        CheckConstraint("available_seats IS NULL OR available_seats >= 0", name="check_ride_seats_non_negative"),
        CheckConstraint("available_seats IS NULL OR available_seats <= total_seats", name="check_ride_seats_lte_total"),
        CheckConstraint("total_seats > 0", name="check_ride_total_seats_positive"),
        CheckConstraint("status IN ('active', 'cancelled', 'completed')", name="check_ride_status"),
        Index("ix_rides_status_departure", "status", "departure_date"),
    )

    @property
    def tracks_seats(self) -> bool:
        return self.available_seats is not None

    @property
    def label(self) -> str:
        """Human-readable name used in notification messages."""
        if self.title and self.title.strip():
            return self.title.strip()
        start = (self.start_location or "").strip()
        end = (self.end_location or "").strip()
        if start and end:
            return f"{start} → {end}"
        return start or end or "the ride"

    def __repr__(self) -> str:
        return f"<Ride(id={self.id}, driver={self.driver_id}, seats={self.available_seats}/{self.total_seats})>"
