"""
User blocking. A block hides the pair from each other in both directions.
"""

import uuid

from sqlalchemy import and_, delete, exists, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.core.config import get_settings
from carpool.core.exceptions import ConflictError, NotFoundError, ValidationError
from carpool.core.logging import get_logger
from carpool.models.block import UserBlock
from carpool.models.profile import Profile
from carpool.services.rate_limit_service import enforce_rate_limit

logger = get_logger(__name__)


async def is_blocked_between(db: AsyncSession, user_a: uuid.UUID, user_b: uuid.UUID) -> bool:
    query = select(
        exists().where(
            or_(
                and_(UserBlock.blocker_id == user_a, UserBlock.blocked_id == user_b),
                and_(UserBlock.blocker_id == user_b, UserBlock.blocked_id == user_a),
            )
        )
    )
    return bool((await db.execute(query)).scalar())


async def block_user(db: AsyncSession, blocker_id: uuid.UUID, blocked_id: uuid.UUID) -> UserBlock:
    settings = get_settings()
    await enforce_rate_limit(
        blocker_id,
        scope="user-block",
        max_requests=settings.BLOCK_RATE_LIMIT,
        window_seconds=settings.BLOCK_RATE_WINDOW_SECONDS,
        message="Too many block actions. Please try again later.",
    )

    if blocker_id == blocked_id:
        raise ValidationError("You cannot block yourself")

    target = await db.execute(select(Profile.id).where(Profile.id == blocked_id))
    if target.scalar_one_or_none() is None:
        raise NotFoundError("User")

    existing = await db.execute(
        select(UserBlock.id).where(
            UserBlock.blocker_id == blocker_id,
            UserBlock.blocked_id == blocked_id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("User is already blocked")

    block = UserBlock(blocker_id=blocker_id, blocked_id=blocked_id)
    try:
        async with db.begin_nested():
            db.add(block)
    except IntegrityError:
        # Lost a race with an identical request
        raise ConflictError("User is already blocked")
    await db.refresh(block)

    logger.info("user_blocked", blocker_id=str(blocker_id), blocked_id=str(blocked_id))
    return block


async def unblock_user(db: AsyncSession, blocker_id: uuid.UUID, blocked_id: uuid.UUID) -> None:
    """Idempotent: unblocking someone who is not blocked is not an error."""
    result = await db.execute(
        delete(UserBlock).where(
            UserBlock.blocker_id == blocker_id,
            UserBlock.blocked_id == blocked_id,
        )
    )
    logger.info(
        "user_unblocked",
        blocker_id=str(blocker_id),
        blocked_id=str(blocked_id),
        removed=result.rowcount,
    )


async def list_blocked_users(db: AsyncSession, blocker_id: uuid.UUID) -> list[UserBlock]:
    result = await db.execute(
        select(UserBlock)
        .where(UserBlock.blocker_id == blocker_id)
        .order_by(UserBlock.created_at.desc())
    )
    return list(result.scalars().all())
