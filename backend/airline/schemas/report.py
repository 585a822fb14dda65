"""
Pydantic schemas for admin reports.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel


class Metrics(BaseModel):
    total_bookings: int
    active_bookings: int
    total_revenue: float
    total_refunds: float
    total_clients: int
    total_flights: int
    average_booking_value: float


class DailyCount(BaseModel):
    day: date
    count: int


class DailyRevenue(BaseModel):
    day: date
    revenue: float


class FlightReportRow(BaseModel):
    flight_id: int
    flight_no: str
    status: str
    passengers: int
    revenue: float


class BookingStats(BaseModel):
    by_status: dict[str, int]
    with_support: int
    with_fasttrack: int
    average_passengers: Optional[float]
