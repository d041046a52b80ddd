"""
Pydantic schemas for conversations and messages.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

MAX_MESSAGE_LENGTH = 5000


class MessageCreate(BaseModel):
    recipient_id: uuid.UUID
    content: str
    ride_id: Optional[uuid.UUID] = None

    @field_validator("content")
    @classmethod
    def check_content(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Message content cannot be empty")
        if len(value) > MAX_MESSAGE_LENGTH:
            raise ValueError(f"Message content cannot exceed {MAX_MESSAGE_LENGTH} characters")
        return value


class MessageResponse(BaseModel):
    id: uuid.UUID
    conversation_id: uuid.UUID
    sender_id: uuid.UUID
    recipient_id: uuid.UUID
    ride_id: Optional[uuid.UUID]
    content: str
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class MessageSentResponse(BaseModel):
    success: bool = True
    message: MessageResponse
    conversation_id: uuid.UUID


class ConversationResponse(BaseModel):
    id: uuid.UUID
    participant1_id: uuid.UUID
    participant2_id: uuid.UUID
    ride_id: Optional[uuid.UUID]
    last_message_at: Optional[datetime]
    created_at: datetime
    unread_count: int = 0

    model_config = {"from_attributes": True}


class ConversationMessagesResponse(BaseModel):
    conversation: ConversationResponse
    messages: list[MessageResponse] = Field(default_factory=list)
