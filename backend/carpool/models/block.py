"""
User blocks. A block is a two-way mirror: either side blocking hides the
pair from each other for messaging, bookings and profile views.
"""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Uuid, UniqueConstraint, CheckConstraint, func

from carpool.db.base import Base, utcnow


class UserBlock(Base):
    __tablename__ = "user_blocks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    blocker_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    blocked_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("blocker_id", "blocked_id", name="uq_user_block_pair"),
        CheckConstraint("blocker_id != blocked_id", name="check_block_not_self"),
    )
