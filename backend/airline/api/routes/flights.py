"""
Public flight endpoints: search, detail and live seat availability.
Nothing here is cached; seat counts must be read live.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from airline.db.session import get_db
from airline.models.enums import SeatClass
from airline.schemas.common import ApiResponse
from airline.schemas.flight import FlightDetail, FlightSearchParams, FlightSearchResult
from airline.schemas.seat import FlightSeatMap, SeatCheckRequest, SeatCheckResult
from airline.services import flight_service, seat_service

router = APIRouter(prefix="/flights", tags=["Flights"])


@router.get("/search", response_model=ApiResponse[list[FlightSearchResult]])
async def search_flights(
    depart_airport_id: Optional[int] = Query(None, gt=0),
    arrive_airport_id: Optional[int] = Query(None, gt=0),
    depart_date: Optional[date] = Query(None),
    passengers: int = Query(1, ge=1, le=10),
    seat_class: SeatClass = Query(SeatClass.ECONOMY),
    db: AsyncSession = Depends(get_db),
):
    """Scheduled flights on a route and UTC date with enough free seats in the class."""
    params = FlightSearchParams(
        depart_airport_id=depart_airport_id,
        arrive_airport_id=arrive_airport_id,
        depart_date=depart_date,
        passengers=passengers,
        seat_class=seat_class,
    )
    results = await flight_service.search_flights(db, params)
    return ApiResponse(message=f"Found {len(results)} flights", data=results)


@router.get("/{flight_id}", response_model=ApiResponse[FlightDetail])
async def get_flight(flight_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await flight_service.get_flight_detail(db, flight_id))


@router.get("/{flight_id}/seats", response_model=ApiResponse[FlightSeatMap])
async def get_flight_seats(flight_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await seat_service.get_seat_map(db, flight_id))


@router.post("/{flight_id}/seats/check", response_model=ApiResponse[SeatCheckResult])
async def check_flight_seats(flight_id: int, data: SeatCheckRequest, db: AsyncSession = Depends(get_db)):
    await seat_service.get_flight_or_404(db, flight_id)
    unavailable = await seat_service.check_seats_availability(db, flight_id, data.seat_ids)
    return ApiResponse(data=SeatCheckResult(available=not unavailable, unavailable_seats=unavailable))
