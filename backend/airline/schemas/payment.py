"""
Pydantic schemas for payments, refunds and receipts.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from airline.core.config import get_settings
from airline.schemas.booking import BookingResponse, PassengerResponse
from airline.schemas.flight import FlightDetail

settings = get_settings()


class PaymentCreate(BaseModel):
    booking_id: int = Field(..., gt=0)
    amount: float = Field(..., gt=0, le=settings.MAX_PAYMENT_AMOUNT)
    currency: str = "USD"
    payment_method: Optional[str] = Field(None, max_length=20)

    @field_validator("currency")
    @classmethod
    def supported_currency(cls, value: str) -> str:
        value = value.upper()
        if value not in settings.SUPPORTED_CURRENCIES:
            raise ValueError(f"Currency must be one of {', '.join(settings.SUPPORTED_CURRENCIES)}")
        return value


class PaymentResponse(BaseModel):
    payment_id: int
    amount: float
    currency: str
    payment_method: Optional[str]
    payment_timestamp: datetime
    status: str
    booking_id: int

    model_config = {"from_attributes": True}


class Receipt(BaseModel):
    payment: PaymentResponse
    booking: BookingResponse
    flight: FlightDetail
    passengers: list[PassengerResponse]


class PaymentCreated(BaseModel):
    payment_id: int
    receipt: Receipt


class PaymentStatusView(BaseModel):
    booking_id: int
    booking_status: str
    payment_status: Optional[str]
    total_cost: float
    amount_paid: float
    payments: list[PaymentResponse]
