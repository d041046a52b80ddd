"""
Pydantic schemas for ride-related request/response validation.
"""

import uuid
from datetime import date, datetime, time
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class RideCreate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    start_location: str = Field(..., min_length=3, max_length=100)
    end_location: str = Field(..., min_length=3, max_length=100)
    departure_date: date
    departure_time: time
    total_seats: int = Field(1, ge=1, le=10)
    track_seats: bool = True
    price_per_seat: Decimal = Field(Decimal("0"), ge=0)
    description: Optional[str] = Field(None, max_length=500)


class RideUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    total_seats: Optional[int] = Field(None, ge=1, le=10)
    available_seats: Optional[int] = Field(None, ge=0, le=10)
    status: Optional[Literal["active", "cancelled", "completed"]] = None

    @field_validator("total_seats", "status")
    @classmethod
    def reject_null(cls, value):
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if value is None:
            raise ValueError("may not be null")
        return value

    @model_validator(mode="after")
    def check_seats(self):
        if (
            self.total_seats is not None
            and self.available_seats is not None
            and self.available_seats > self.total_seats
        ):
            raise ValueError("available_seats cannot exceed total_seats")
        return self


class RideResponse(BaseModel):
    id: uuid.UUID
    driver_id: uuid.UUID
    title: Optional[str]
    start_location: str
    end_location: str
    departure_date: date
    departure_time: time
    total_seats: int
    available_seats: Optional[int]
    price_per_seat: Decimal
    description: Optional[str]
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class RideListResponse(BaseModel):
    rides: list[RideResponse]
    total: int
    page: int
    page_size: int
    cached: bool = False


class RideDeletedResponse(BaseModel):
    success: bool = True
    message: str = "Ride deleted successfully"
