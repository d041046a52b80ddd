"""
Invitation endpoint: a driver offers a seat to a specific member.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from carpool.db.session import get_db
from carpool.schemas.booking import BookingResponse, InvitationCreate
from carpool.services.cache_service import invalidate_after_commit
from carpool.services.invitation_service import create_invitation
from carpool.core.security import get_current_user_id

router = APIRouter(prefix="/invitations", tags=["Invitations"])


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def invite_passenger(
    invitation: InvitationCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Invite a rider. The seat is held until the rider answers."""
    booking = await create_invitation(db, user_id, invitation)
    invalidate_after_commit(db)
    return booking
