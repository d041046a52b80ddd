"""
Pydantic schemas for booking and invitation request/response validation.
"""

import uuid
from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, Field

from carpool.domain.booking_state import BookingAction


class BookingCreate(BaseModel):
    ride_id: uuid.UUID
    pickup_location: str = Field(..., min_length=3, max_length=100)
    pickup_date: date
    pickup_time: time
    passenger_notes: Optional[str] = Field(None, max_length=500)


class InvitationCreate(BaseModel):
    ride_id: uuid.UUID
    passenger_id: uuid.UUID
    pickup_location: str = Field(..., min_length=3, max_length=100)
    pickup_time: datetime
    driver_notes: Optional[str] = Field(None, max_length=500)


class BookingActionRequest(BaseModel):
    action: BookingAction


class BookingActionResponse(BaseModel):
    success: bool = True
    status: str


class BookingResponse(BaseModel):
    id: uuid.UUID
    ride_id: uuid.UUID
    driver_id: uuid.UUID
    passenger_id: uuid.UUID
    status: str
    pickup_location: Optional[str]
    pickup_time: Optional[datetime]
    driver_notes: Optional[str]
    passenger_notes: Optional[str]
    confirmed_at: Optional[datetime]
    created_at: datetime

    model_config = {"from_attributes": True}
