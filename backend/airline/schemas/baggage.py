"""
Pydantic schemas for baggage tracking.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from airline.models.enums import BaggageStatus


class BaggageCreate(BaseModel):
    passenger_id: int = Field(..., gt=0)
    weight: Optional[float] = Field(None, gt=0, le=50)
    status: BaggageStatus = BaggageStatus.CHECKED_IN


class BaggageStatusUpdate(BaseModel):
    status: BaggageStatus


class BaggageResponse(BaseModel):
    baggage_id: int
    tracking_no: str
    status: str
    weight: Optional[float]
    passenger_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BaggageTracking(BaggageResponse):
    passenger_name: str
    flight_no: str
    flight_status: str
    depart_iata: str
    arrive_iata: str
