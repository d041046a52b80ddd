"""
Blocking endpoints.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.db.session import get_db
from carpool.schemas.profile import BlockRequest, BlockResponse, UnblockResponse
from carpool.services.block_service import block_user, list_blocked_users, unblock_user
from carpool.core.security import get_current_user_id

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/block", response_model=BlockResponse, status_code=status.HTTP_201_CREATED)
async def block_user_endpoint(
    body: BlockRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Block a member. Rate limited per user."""
    return await block_user(db, user_id, body.blocked_id)


@router.post("/unblock", response_model=UnblockResponse)
async def unblock_user_endpoint(
    body: BlockRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await unblock_user(db, user_id, body.blocked_id)
    return UnblockResponse()


@router.get("/blocked", response_model=list[BlockResponse])
async def list_blocked_endpoint(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await list_blocked_users(db, user_id)
