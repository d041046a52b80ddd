"""
Two-party conversations and message delivery.

Booking workflows use `notify_participant`, which runs the delivery in a
SAVEPOINT: a failed notification is logged and rolled back on its own,
never taking the booking change with it.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from carpool.core.logging import get_logger
from carpool.core.metrics import record_notification
from carpool.models.conversation import Conversation, Message
from carpool.models.profile import Profile
from carpool.services.block_service import is_blocked_between

logger = get_logger(__name__)


def _ordered_pair(a: uuid.UUID, b: uuid.UUID) -> tuple[uuid.UUID, uuid.UUID]:
    return tuple(sorted((a, b), key=str))


async def ensure_conversation(
    db: AsyncSession,
    participant_a: uuid.UUID,
    participant_b: uuid.UUID,
    ride_id: Optional[uuid.UUID] = None,
) -> Conversation:
    """Find the conversation for this pair and ride (either order) or create it."""
    ride_clause = Conversation.ride_id == ride_id if ride_id else Conversation.ride_id.is_(None)
    result = await db.execute(
        select(Conversation)
        .where(
            or_(
                and_(Conversation.participant1_id == participant_a, Conversation.participant2_id == participant_b),
                and_(Conversation.participant1_id == participant_b, Conversation.participant2_id == participant_a),
            ),
            ride_clause,
        )
        .order_by(Conversation.created_at.asc())
        .limit(1)
    )
    conversation = result.scalar_one_or_none()
    if conversation is not None:
        return conversation

    first, second = _ordered_pair(participant_a, participant_b)
    conversation = Conversation(participant1_id=first, participant2_id=second, ride_id=ride_id)
    db.add(conversation)
    await db.flush()
    await db.refresh(conversation)
    logger.info("conversation_created", conversation_id=str(conversation.id))
    return conversation


async def send_message(
    db: AsyncSession,
    sender_id: uuid.UUID,
    recipient_id: uuid.UUID,
    ride_id: Optional[uuid.UUID],
    content: str,
) -> Message:
    """Append a message to the pair's conversation and bump its activity time."""
    conversation = await ensure_conversation(db, sender_id, recipient_id, ride_id)

    message = Message(
        conversation_id=conversation.id,
        sender_id=sender_id,
        recipient_id=recipient_id,
        ride_id=ride_id,
        content=content,
    )
    db.add(message)
    conversation.last_message_at = datetime.now(timezone.utc)
    await db.flush()
    await db.refresh(message)
    return message


async def notify_participant(
    db: AsyncSession,
    sender_id: uuid.UUID,
    recipient_id: uuid.UUID,
    ride_id: Optional[uuid.UUID],
    content: str,
    event: str,
) -> bool:
    """Best-effort booking notification. Returns whether it was delivered."""
    try:
        async with db.begin_nested():
            await send_message(db, sender_id, recipient_id, ride_id, content)
    except Exception as e:
        record_notification(sent=False)
        logger.error(
            "booking_notification_failed",
            notification=event,
            sender_id=str(sender_id),
            recipient_id=str(recipient_id),
            error=str(e),
        )
        return False

    record_notification(sent=True)
    logger.info("booking_notification_sent", notification=event, recipient_id=str(recipient_id))
    return True


async def post_message(
    db: AsyncSession,
    sender_id: uuid.UUID,
    recipient_id: uuid.UUID,
    content: str,
    ride_id: Optional[uuid.UUID] = None,
) -> Message:
    """Direct message between members. Anyone may message anyone they have not blocked."""
    if sender_id == recipient_id:
        raise ValidationError("You cannot message yourself")

    recipient = await db.execute(select(Profile.id).where(Profile.id == recipient_id))
    if recipient.scalar_one_or_none() is None:
        raise NotFoundError("Recipient")

    if await is_blocked_between(db, sender_id, recipient_id):
        raise AuthorizationError("You cannot message this user")

    message = await send_message(db, sender_id, recipient_id, ride_id, content)
    logger.info("message_sent", conversation_id=str(message.conversation_id), sender_id=str(sender_id))
    return message


async def list_conversations(db: AsyncSession, user_id: uuid.UUID) -> list[tuple[Conversation, int]]:
    """Caller's conversations, most recently active first, with unread counts."""
    unread = (
        select(Message.conversation_id, func.count(Message.id).label("unread"))
        .where(Message.recipient_id == user_id, Message.is_read.is_(False))
        .group_by(Message.conversation_id)
        .subquery()
    )
    result = await db.execute(
        select(Conversation, func.coalesce(unread.c.unread, 0))
        .outerjoin(unread, unread.c.conversation_id == Conversation.id)
        .where(or_(Conversation.participant1_id == user_id, Conversation.participant2_id == user_id))
        .order_by(
            Conversation.last_message_at.is_(None),
            Conversation.last_message_at.desc(),
            Conversation.created_at.desc(),
        )
    )
    return [(conversation, int(count)) for conversation, count in result.all()]


async def get_conversation_messages(
    db: AsyncSession,
    conversation_id: uuid.UUID,
    user_id: uuid.UUID,
) -> tuple[Conversation, list[Message]]:
    """Messages in chronological order; marks the caller's incoming ones read."""
    result = await db.execute(select(Conversation).where(Conversation.id == conversation_id))
    conversation = result.scalar_one_or_none()
    # Outsiders get the same answer as a missing conversation
    if conversation is None or not conversation.has_participant(user_id):
        raise NotFoundError("Conversation")

    await db.execute(
        update(Message)
        .where(
            Message.conversation_id == conversation_id,
            Message.recipient_id == user_id,
            Message.is_read.is_(False),
        )
        .values(is_read=True)
    )

    messages = await db.execute(
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc())
        .execution_options(populate_existing=True)
    )
    return conversation, list(messages.scalars().all())
