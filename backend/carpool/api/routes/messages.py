"""
Messaging endpoints: direct messages and conversation threads.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.db.session import get_db
from carpool.schemas.message import (
    ConversationMessagesResponse,
    ConversationResponse,
    MessageCreate,
    MessageResponse,
    MessageSentResponse,
)
from carpool.services.conversation_service import get_conversation_messages, list_conversations, post_message
from carpool.services.profile_service import ensure_profile_complete
from carpool.core.security import get_current_user_id

router = APIRouter(prefix="/messages", tags=["Messages"])


def _conversation_response(conversation, unread_count: int = 0) -> ConversationResponse:
    response = ConversationResponse.model_validate(conversation)
    response.unread_count = unread_count
    return response


@router.post("/", response_model=MessageSentResponse, status_code=status.HTTP_201_CREATED)
async def send_message_endpoint(
    message_data: MessageCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Send a message, opening a conversation if the pair has none yet."""
    await ensure_profile_complete(db, user_id, "sending messages")
    message = await post_message(
        db,
        sender_id=user_id,
        recipient_id=message_data.recipient_id,
        content=message_data.content,
        ride_id=message_data.ride_id,
    )
    return MessageSentResponse(
        message=MessageResponse.model_validate(message),
        conversation_id=message.conversation_id,
    )


@router.get("/conversations", response_model=list[ConversationResponse])
async def list_conversations_endpoint(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    conversations = await list_conversations(db, user_id)
    return [_conversation_response(c, unread) for c, unread in conversations]


@router.get("/conversations/{conversation_id}", response_model=ConversationMessagesResponse)
async def get_conversation_endpoint(
    conversation_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Messages oldest first. Opening a thread marks incoming messages read."""
    conversation, messages = await get_conversation_messages(db, conversation_id, user_id)
    return ConversationMessagesResponse(
        conversation=_conversation_response(conversation),
        messages=[MessageResponse.model_validate(m) for m in messages],
    )
