"""
Two-party conversations and their messages.
"""

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import relationship

from carpool.db.base import Base, utcnow


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # Stored sorted so (a, b) and (b, a) map to the same row
    participant1_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False)
    participant2_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False)
    ride_id = Column(Uuid, ForeignKey("rides.id", ondelete="SET NULL"), nullable=True)
    last_message_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    messages = relationship("Message", back_populates="conversation", lazy="raise")

    __table_args__ = (
        Index("ix_conversations_participants", "participant1_id", "participant2_id"),
    )

    def has_participant(self, user_id) -> bool:
        return user_id in (self.participant1_id, self.participant2_id)


class Message(Base):
    __tablename__ = "messages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    conversation_id = Column(
        Uuid, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False)
    recipient_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    ride_id = Column(Uuid, ForeignKey("rides.id", ondelete="SET NULL"), nullable=True)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    conversation = relationship("Conversation", back_populates="messages", lazy="raise")
