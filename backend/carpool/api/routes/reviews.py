"""
Review endpoints: rate the other participant of a completed trip.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.db.session import get_db
from carpool.schemas.review import ReviewCreate, ReviewResponse
from carpool.services.review_service import create_review, list_reviews
from carpool.core.security import get_current_user_id

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("/", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review_endpoint(
    body: ReviewCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Review a completed trip you took part in.

    Rating is 1-5 and the comment needs at least five words. One review per
    trip per member.
    """
    return await create_review(db, user_id, body)


@router.get("/", response_model=list[ReviewResponse])
async def list_reviews_endpoint(
    reviewee_id: Optional[uuid.UUID] = Query(None, alias="user_id"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Newest reviews first; pass user_id for the reviews a member has received."""
    return await list_reviews(db, reviewee_id, limit, offset)
