"""
Pydantic schemas for airplanes and their seat configuration.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _check_year(value: Optional[int]) -> Optional[int]:
    if value is not None and not 1950 <= value <= datetime.now(timezone.utc).year + 2:
        raise ValueError("Manufacturing year must be between 1950 and two years from now")
    return value


class AirplaneCreate(BaseModel):
    type: str = Field(..., min_length=1, max_length=100)
    registration: str = Field(..., min_length=1, max_length=20, pattern=r"^[A-Z0-9-]+$")
    reg_country: str = Field(..., min_length=1, max_length=100)
    msn: str = Field(..., min_length=1, max_length=50)
    manufacturing_year: int
    capacity: int = Field(..., ge=1, le=1000)
    min_price: float = Field(..., gt=0)

    check_year = field_validator("manufacturing_year")(_check_year)


class AirplaneUpdate(BaseModel):
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    registration: Optional[str] = Field(None, min_length=1, max_length=20, pattern=r"^[A-Z0-9-]+$")
    reg_country: Optional[str] = Field(None, min_length=1, max_length=100)
    msn: Optional[str] = Field(None, min_length=1, max_length=50)
    manufacturing_year: Optional[int] = None
    capacity: Optional[int] = Field(None, ge=1, le=1000)
    min_price: Optional[float] = Field(None, gt=0)

    check_year = field_validator("manufacturing_year")(_check_year)


class AirplaneResponse(BaseModel):
    airplane_id: int
    type: str
    registration: str
    reg_country: str
    msn: str
    manufacturing_year: int
    capacity: int
    min_price: float

    model_config = {"from_attributes": True}
