"""
Pydantic schemas for booking-related request/response validation.

BookingCreate accepts incomplete passengers; validate_booking_data reports
every problem in one response.
"""

from datetime import date, datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator

from airline.models.enums import BookingStatus
from airline.schemas.flight import FlightDetail


def normalize_flag(value: Any) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    if value is None:
        return "no"
    text = str(value).strip().lower()
    if text in ("yes", "y", "true", "1"):
        return "yes"
    if text in ("no", "n", "false", "0", ""):
        return "no"
    raise ValueError("Flag must be yes/no or a boolean")


class PassengerInput(BaseModel):
    firstname: str = ""
    lastname: str = ""
    passport_no: str = ""
    nationality: str = ""
    gender: str = ""
    dob: Union[str, date, None] = None
    seat_id: int = 0
    phone_no: Optional[str] = Field(None, max_length=20, pattern=r"^\+?[\d\s\-()]*$")
    weight_limit: int = 20


class BookingCreate(BaseModel):
    flight_id: int = 0
    passengers: list[PassengerInput] = Field(default_factory=list, max_length=10)
    support: str = "no"
    fasttrack: str = "no"

    @field_validator("support", "fasttrack", mode="before")
    @classmethod
    def flags(cls, value: Any) -> str:
        return normalize_flag(value)


class BookingUpdate(BaseModel):
    support: Optional[str] = None
    fasttrack: Optional[str] = None

    @field_validator("support", "fasttrack", mode="before")
    @classmethod
    def flags(cls, value: Any) -> Optional[str]:
        return None if value is None else normalize_flag(value)


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingResponse(BaseModel):
    booking_id: int
    booking_no: str
    support: str
    fasttrack: str
    status: str
    client_id: int
    flight_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PassengerResponse(BaseModel):
    passenger_id: int
    firstname: str
    lastname: str
    passport_no: Optional[str]
    nationality: str
    phone_no: Optional[str]
    gender: str
    dob: date
    weight_limit: int
    seat_id: int
    seat_no: Optional[str] = None
    seat_class: Optional[str] = None
    booking_id: int
    flight_id: int


class BookingCreated(BaseModel):
    booking: BookingResponse
    passengers: list[PassengerResponse]
    total_cost: float


class BookingDetail(BaseModel):
    booking: BookingResponse
    flight: FlightDetail
    passengers: list[PassengerResponse]
    payment_status: Optional[str]
    total_cost: float
    can_modify: bool


class RefundSummary(BaseModel):
    payment_id: int
    amount: float
    currency: str


class BookingCancelled(BaseModel):
    booking_id: int
    status: str
    refund: Optional[RefundSummary] = None
