"""
Passenger endpoints. Every operation requires ownership of the parent
booking, or admin.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from airline.api.deps import get_current_user
from airline.core.security import CurrentUser
from airline.db.session import get_db
from airline.schemas.booking import PassengerInput, PassengerResponse
from airline.schemas.common import ApiResponse
from airline.schemas.passenger import PassengerUpdate, SeatChange
from airline.services import passenger_service

router = APIRouter(prefix="/passengers", tags=["Passengers"])


@router.get("/booking/{booking_id}", response_model=ApiResponse[list[PassengerResponse]])
async def list_booking_passengers(
    booking_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await passenger_service.list_booking_passengers(db, booking_id, user))


@router.post(
    "/booking/{booking_id}",
    response_model=ApiResponse[PassengerResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_passenger(
    booking_id: int,
    data: PassengerInput,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    passenger = await passenger_service.add_passenger(db, booking_id, user, data)
    return ApiResponse(message="Passenger added successfully", data=passenger)


@router.get("/{passenger_id}", response_model=ApiResponse[PassengerResponse])
async def get_passenger(
    passenger_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await passenger_service.get_passenger(db, passenger_id, user))


@router.put("/{passenger_id}", response_model=ApiResponse[PassengerResponse])
async def update_passenger(
    passenger_id: int,
    data: PassengerUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    passenger = await passenger_service.update_passenger(db, passenger_id, user, data)
    return ApiResponse(message="Passenger updated successfully", data=passenger)


@router.patch("/{passenger_id}/seat", response_model=ApiResponse[PassengerResponse])
async def change_seat(
    passenger_id: int,
    data: SeatChange,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    passenger = await passenger_service.change_seat(db, passenger_id, user, data.seat_id)
    return ApiResponse(message="Seat changed successfully", data=passenger)


@router.delete("/{passenger_id}", response_model=ApiResponse[None])
async def remove_passenger(
    passenger_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await passenger_service.remove_passenger(db, passenger_id, user)
    return ApiResponse(message="Passenger removed successfully")
