"""
Pydantic schemas for member vehicles.
"""

import uuid
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

NAME_PATTERN = r"^[a-zA-Z0-9\s]+$"
PLATE_PATTERN = r"^[a-zA-Z0-9\s-]*$"


class VehicleCreate(BaseModel):
    make: str = Field(..., min_length=1, max_length=50, pattern=NAME_PATTERN)
    model: str = Field(..., min_length=1, max_length=50, pattern=NAME_PATTERN)
    year: int = Field(..., ge=1900)
    color: str = Field(..., min_length=1, max_length=50, pattern=NAME_PATTERN)
    license_plate: Optional[str] = Field(None, max_length=20, pattern=PLATE_PATTERN)
    drivetrain: Literal["FWD", "RWD", "AWD", "4WD"]

    @field_validator("year")
    @classmethod
    def not_past_next_model_year(cls, value: int) -> int:
        if value > date.today().year + 1:
            raise ValueError("Year cannot be in the future")
        return value


class VehicleResponse(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    make: str
    model: str
    year: int
    color: str
    license_plate: Optional[str]
    drivetrain: str
    created_at: datetime

    model_config = {"from_attributes": True}
