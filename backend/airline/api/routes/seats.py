"""
Seat availability endpoints keyed by flight.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from airline.db.session import get_db
from airline.schemas.common import ApiResponse
from airline.schemas.seat import FlightSeatMap, SeatCheckRequest, SeatCheckResult
from airline.services import seat_service

router = APIRouter(prefix="/seats", tags=["Seats"])


@router.get("/flight/{flight_id}", response_model=ApiResponse[FlightSeatMap])
async def flight_seat_map(flight_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await seat_service.get_seat_map(db, flight_id))


@router.post("/flight/{flight_id}/check", response_model=ApiResponse[SeatCheckResult])
async def check_seats(flight_id: int, data: SeatCheckRequest, db: AsyncSession = Depends(get_db)):
    await seat_service.get_flight_or_404(db, flight_id)
    unavailable = await seat_service.check_seats_availability(db, flight_id, data.seat_ids)
    message = "All seats are available" if not unavailable else "Some seats are not available"
    return ApiResponse(message=message, data=SeatCheckResult(available=not unavailable, unavailable_seats=unavailable))
