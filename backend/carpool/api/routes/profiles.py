"""
Profile endpoints.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.core.exceptions import NotFoundError
from carpool.db.session import get_db
from carpool.schemas.profile import ProfileResponse, ProfileUpdate
from carpool.services.profile_service import get_profile, get_visible_profile, upsert_profile
from carpool.core.security import get_current_user_id

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    profile = await get_profile(db, user_id)
    if profile is None:
        raise NotFoundError("Profile")
    return profile


@router.put("/me", response_model=ProfileResponse)
async def save_my_profile(
    profile_data: ProfileUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Create or replace the caller's profile. A first name completes it."""
    return await upsert_profile(db, user_id, profile_data)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_member_profile(
    profile_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Another member's profile. Hidden when either side has blocked the other."""
    return await get_visible_profile(db, user_id, profile_id)
