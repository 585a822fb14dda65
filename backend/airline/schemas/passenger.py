"""
Pydantic schemas for passenger maintenance on an existing booking.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from airline.models.enums import Gender


class PassengerUpdate(BaseModel):
    firstname: Optional[str] = Field(None, min_length=1, max_length=50)
    lastname: Optional[str] = Field(None, min_length=1, max_length=50)
    passport_no: Optional[str] = Field(None, min_length=1, max_length=20)
    nationality: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_no: Optional[str] = Field(None, max_length=20, pattern=r"^\+?[\d\s\-()]*$")
    gender: Optional[Gender] = None
    dob: Optional[date] = None
    weight_limit: Optional[int] = Field(None, ge=0, le=50)


class SeatChange(BaseModel):
    seat_id: int = Field(..., gt=0)
