"""
Profile lookups and the profile-completeness gate for mutating actions.
"""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.core.exceptions import AuthorizationError, NotFoundError
from carpool.core.logging import get_logger
from carpool.models.profile import Profile
from carpool.schemas.profile import ProfileUpdate
from carpool.services.block_service import is_blocked_between

logger = get_logger(__name__)


async def get_profile(db: AsyncSession, user_id: uuid.UUID) -> Optional[Profile]:
    result = await db.execute(select(Profile).where(Profile.id == user_id))
    return result.scalar_one_or_none()


async def ensure_profile_complete(
    db: AsyncSession,
    user_id: uuid.UUID,
    action_description: str = "performing this action",
) -> Profile:
    """
    Members must have at least a first name before they can post, book,
    invite or message. Raises 403 otherwise.
    """
    profile = await get_profile(db, user_id)
    if profile is None or not profile.is_complete:
        logger.info("profile_incomplete", user_id=str(user_id), action=action_description)
        raise AuthorizationError(f"You must complete your profile before {action_description}")
    return profile


async def upsert_profile(db: AsyncSession, user_id: uuid.UUID, data: ProfileUpdate) -> Profile:
    profile = await get_profile(db, user_id)
    if profile is None:
        profile = Profile(id=user_id)
        db.add(profile)

    for field, value in data.model_dump().items():
        setattr(profile, field, value)

    await db.flush()
    await db.refresh(profile)
    logger.info("profile_saved", user_id=str(user_id))
    return profile


async def get_visible_profile(db: AsyncSession, viewer_id: uuid.UUID, profile_id: uuid.UUID) -> Profile:
    """A blocked pair cannot see each other; that reads as 'not found'."""
    profile = await get_profile(db, profile_id)
    if profile is None:
        raise NotFoundError("Profile")
    if viewer_id != profile_id and await is_blocked_between(db, viewer_id, profile_id):
        raise NotFoundError("Profile")
    return profile
