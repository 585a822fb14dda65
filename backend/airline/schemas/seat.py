"""
Pydantic schemas for seats and flight seat maps.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from airline.models.enums import normalize_seat_class

SEAT_NO_PATTERN = r"^\d+[A-J]$"


def _check_seat_class(value: Optional[str]) -> Optional[str]:
    if value is not None and normalize_seat_class(value) is None:
        raise ValueError("Seat class must be one of First Class, Business, Premium Economy, Economy")
    return value


class SeatCreate(BaseModel):
    seat_no: str = Field(..., pattern=SEAT_NO_PATTERN)
    seat_class: str
    price: float = Field(..., gt=0)

    check_seat_class = field_validator("seat_class")(_check_seat_class)


class SeatUpdate(BaseModel):
    seat_no: Optional[str] = Field(None, pattern=SEAT_NO_PATTERN)
    seat_class: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)

    check_seat_class = field_validator("seat_class")(_check_seat_class)


class SeatResponse(BaseModel):
    seat_id: int
    seat_no: str
    seat_class: str
    price: float
    airplane_id: int

    model_config = {"from_attributes": True}


class SeatMapEntry(BaseModel):
    seat_id: int
    seat_no: str
    seat_class: str
    price: float
    available: bool


class SeatClassSummary(BaseModel):
    seat_class: str
    total: int
    available: int
    booked: int
    min_price: float
    max_price: float


class FlightSeatMap(BaseModel):
    flight_id: int
    airplane_id: int
    seat_map: dict[str, dict[str, list[SeatMapEntry]]]
    summary: list[SeatClassSummary]


class SeatCheckRequest(BaseModel):
    seat_ids: list[int] = Field(..., min_length=1, max_length=10)


class SeatCheckResult(BaseModel):
    available: bool
    unavailable_seats: list[int]


class AirplaneSeatConfig(BaseModel):
    airplane_id: int
    seats: list[SeatResponse]
    pricing_by_class: dict[str, dict[str, float]]
