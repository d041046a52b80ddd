"""
Trip reviews. Each participant of a completed booking may review the
other participant once.
"""

import uuid

from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
    UniqueConstraint,
    CheckConstraint,
)

from carpool.db.base import Base, TimestampMixin


class Review(Base, TimestampMixin):
    __tablename__ = "reviews"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id = Column(Uuid, ForeignKey("trip_bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    reviewee_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    reviewer_role = Column(String(20), nullable=False)
    reviewed_role = Column(String(20), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)

    __table_args__ = (
        UniqueConstraint("booking_id", "reviewer_id", name="uq_review_booking_reviewer"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="check_review_rating"),
        CheckConstraint("reviewer_role IN ('driver', 'passenger')", name="check_review_reviewer_role"),
        CheckConstraint("reviewed_role IN ('driver', 'passenger')", name="check_review_reviewed_role"),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, booking={self.booking_id}, rating={self.rating})>"
