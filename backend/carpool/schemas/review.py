"""
Pydantic schemas for trip reviews.

Rating and comment rules are checked in review_service so the API can
answer with its own messages.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel


class ReviewCreate(BaseModel):
    booking_id: uuid.UUID
    rating: int
    comment: str


class ReviewResponse(BaseModel):
    id: uuid.UUID
    booking_id: uuid.UUID
    reviewer_id: uuid.UUID
    reviewee_id: uuid.UUID
    reviewer_role: str
    reviewed_role: str
    rating: int
    comment: str
    created_at: datetime

    model_config = {"from_attributes": True}
