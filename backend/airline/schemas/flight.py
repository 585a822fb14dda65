"""
Pydantic schemas for flights and flight search.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from airline.models.enums import FlightStatus, SeatClass
from airline.schemas.airplane import AirplaneResponse
from airline.schemas.airport import AirportResponse


class FlightCreate(BaseModel):
    flight_no: str = Field(..., min_length=2, max_length=10, pattern=r"^[A-Z0-9]+$")
    depart_when: datetime
    arrive_when: datetime
    airplane_id: int = Field(..., gt=0)
    depart_airport_id: int = Field(..., gt=0)
    arrive_airport_id: int = Field(..., gt=0)
    status: FlightStatus = FlightStatus.SCHEDULED

    @model_validator(mode="after")
    def check_schedule(self):
        if self.arrive_when <= self.depart_when:
            raise ValueError("Arrival time must be after departure time")
        if self.depart_airport_id == self.arrive_airport_id:
            raise ValueError("Departure and arrival airports must be different")
        return self


class FlightUpdate(BaseModel):
    flight_no: Optional[str] = Field(None, min_length=2, max_length=10, pattern=r"^[A-Z0-9]+$")
    depart_when: Optional[datetime] = None
    arrive_when: Optional[datetime] = None
    airplane_id: Optional[int] = Field(None, gt=0)
    depart_airport_id: Optional[int] = Field(None, gt=0)
    arrive_airport_id: Optional[int] = Field(None, gt=0)
    status: Optional[FlightStatus] = None


class FlightStatusUpdate(BaseModel):
    status: FlightStatus


class FlightResponse(BaseModel):
    flight_id: int
    flight_no: str
    depart_when: datetime
    arrive_when: datetime
    status: str
    airplane_id: int
    depart_airport_id: int
    arrive_airport_id: int

    model_config = {"from_attributes": True}


class FlightDetail(FlightResponse):
    depart_airport: AirportResponse
    arrive_airport: AirportResponse
    airplane: AirplaneResponse
    duration: str


class FlightSearchParams(BaseModel):
    depart_airport_id: Optional[int] = None
    arrive_airport_id: Optional[int] = None
    depart_date: Optional[date] = None
    passengers: int = Field(1, ge=1, le=10)
    seat_class: SeatClass = SeatClass.ECONOMY


class FlightSearchResult(FlightDetail):
    seat_class: str
    available_seats: int
    min_price: Optional[float]


class FlightStats(BaseModel):
    total: int
    by_status: dict[str, int]
    upcoming: int
