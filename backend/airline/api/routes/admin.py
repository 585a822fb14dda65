"""
Admin endpoints for flights, airplanes, seats, airports, bookings,
payments and client accounts. Every route requires the admin role.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from airline.api.deps import require_admin
from airline.core.security import CurrentUser
from airline.db.session import get_db
from airline.models.enums import BookingStatus, FlightStatus, PaymentStatus
from airline.schemas.airplane import AirplaneCreate, AirplaneResponse, AirplaneUpdate
from airline.schemas.airport import AirportCreate, AirportResponse, AirportUpdate
from airline.schemas.auth import ClientAdminUpdate, ClientResponse
from airline.schemas.booking import BookingDetail, BookingResponse, PassengerResponse
from airline.schemas.common import ApiResponse, Pagination
from airline.schemas.flight import FlightCreate, FlightDetail, FlightStats, FlightStatusUpdate, FlightUpdate
from airline.schemas.payment import PaymentResponse
from airline.schemas.seat import AirplaneSeatConfig, SeatCreate, SeatResponse, SeatUpdate
from airline.services import (
    airplane_service,
    airport_service,
    auth_service,
    booking_service,
    flight_service,
    payment_service,
)
from airline.services.cache_service import invalidate_airport_cache

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


# Flights

@router.get("/flights", response_model=ApiResponse[list[FlightDetail]])
async def list_flights(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[FlightStatus] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    flights, total = await flight_service.list_flights(db, page, limit, status)
    return ApiResponse(data=flights, pagination=Pagination.build(page, limit, total))


@router.get("/flights/stats", response_model=ApiResponse[FlightStats])
async def flight_stats(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await flight_service.flight_stats(db))


@router.get("/flights/{flight_id}", response_model=ApiResponse[FlightDetail])
async def get_flight(flight_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await flight_service.get_flight_detail(db, flight_id))


@router.post("/flights", response_model=ApiResponse[FlightDetail], status_code=status.HTTP_201_CREATED)
async def create_flight(data: FlightCreate, db: AsyncSession = Depends(get_db)):
    """Schedule a flight; the airplane must be free for the whole time span."""
    return ApiResponse(message="Flight created successfully", data=await flight_service.create_flight(db, data))


@router.put("/flights/{flight_id}", response_model=ApiResponse[FlightDetail])
async def update_flight(flight_id: int, data: FlightUpdate, db: AsyncSession = Depends(get_db)):
    flight = await flight_service.update_flight(db, flight_id, data)
    return ApiResponse(message="Flight updated successfully", data=flight)


@router.patch("/flights/{flight_id}/status", response_model=ApiResponse[FlightDetail])
async def update_flight_status(flight_id: int, data: FlightStatusUpdate, db: AsyncSession = Depends(get_db)):
    flight = await flight_service.update_flight_status(db, flight_id, data)
    return ApiResponse(message="Flight status updated", data=flight)


@router.delete("/flights/{flight_id}", response_model=ApiResponse[None])
async def delete_flight(flight_id: int, db: AsyncSession = Depends(get_db)):
    await flight_service.delete_flight(db, flight_id)
    return ApiResponse(message="Flight deleted successfully")


@router.get("/flights/{flight_id}/passengers", response_model=ApiResponse[list[PassengerResponse]])
async def flight_passengers(flight_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await flight_service.flight_passengers(db, flight_id))


# Airplanes and seats

@router.get("/airplanes", response_model=ApiResponse[list[AirplaneResponse]])
async def list_airplanes(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    airplanes, total = await airplane_service.list_airplanes(db, page, limit)
    return ApiResponse(
        data=[AirplaneResponse.model_validate(a) for a in airplanes],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/airplanes/{airplane_id}", response_model=ApiResponse[AirplaneResponse])
async def get_airplane(airplane_id: int, db: AsyncSession = Depends(get_db)):
    airplane = await airplane_service.get_airplane(db, airplane_id)
    return ApiResponse(data=AirplaneResponse.model_validate(airplane))


@router.post("/airplanes", response_model=ApiResponse[AirplaneResponse], status_code=status.HTTP_201_CREATED)
async def create_airplane(data: AirplaneCreate, db: AsyncSession = Depends(get_db)):
    airplane = await airplane_service.create_airplane(db, data)
    return ApiResponse(message="Airplane created successfully", data=AirplaneResponse.model_validate(airplane))


@router.put("/airplanes/{airplane_id}", response_model=ApiResponse[AirplaneResponse])
async def update_airplane(airplane_id: int, data: AirplaneUpdate, db: AsyncSession = Depends(get_db)):
    airplane = await airplane_service.update_airplane(db, airplane_id, data)
    return ApiResponse(message="Airplane updated successfully", data=AirplaneResponse.model_validate(airplane))


@router.delete("/airplanes/{airplane_id}", response_model=ApiResponse[None])
async def delete_airplane(airplane_id: int, db: AsyncSession = Depends(get_db)):
    await airplane_service.delete_airplane(db, airplane_id)
    return ApiResponse(message="Airplane deleted successfully")


@router.get("/airplanes/{airplane_id}/seats", response_model=ApiResponse[AirplaneSeatConfig])
async def airplane_seats(airplane_id: int, db: AsyncSession = Depends(get_db)):
    seats, pricing = await airplane_service.get_airplane_seats(db, airplane_id)
    return ApiResponse(
        data=AirplaneSeatConfig(
            airplane_id=airplane_id,
            seats=[SeatResponse.model_validate(s) for s in seats],
            pricing_by_class=pricing,
        )
    )


@router.post(
    "/airplanes/{airplane_id}/seats",
    response_model=ApiResponse[SeatResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_seat(airplane_id: int, data: SeatCreate, db: AsyncSession = Depends(get_db)):
    seat = await airplane_service.create_seat(db, airplane_id, data)
    return ApiResponse(message="Seat created successfully", data=SeatResponse.model_validate(seat))


@router.get("/seats/{seat_id}", response_model=ApiResponse[SeatResponse])
async def get_seat(seat_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=SeatResponse.model_validate(await airplane_service.get_seat(db, seat_id)))


@router.put("/seats/{seat_id}", response_model=ApiResponse[SeatResponse])
async def update_seat(seat_id: int, data: SeatUpdate, db: AsyncSession = Depends(get_db)):
    seat = await airplane_service.update_seat(db, seat_id, data)
    return ApiResponse(message="Seat updated successfully", data=SeatResponse.model_validate(seat))


@router.delete("/seats/{seat_id}", response_model=ApiResponse[None])
async def delete_seat(seat_id: int, db: AsyncSession = Depends(get_db)):
    await airplane_service.delete_seat(db, seat_id)
    return ApiResponse(message="Seat deleted successfully")


# Airports (every change invalidates the public airport cache)

@router.post("/airports", response_model=ApiResponse[AirportResponse], status_code=status.HTTP_201_CREATED)
async def create_airport(data: AirportCreate, db: AsyncSession = Depends(get_db)):
    airport = await airport_service.create_airport(db, data)
    await invalidate_airport_cache()
    return ApiResponse(message="Airport created successfully", data=AirportResponse.model_validate(airport))


@router.put("/airports/{airport_id}", response_model=ApiResponse[AirportResponse])
async def update_airport(airport_id: int, data: AirportUpdate, db: AsyncSession = Depends(get_db)):
    airport = await airport_service.update_airport(db, airport_id, data)
    await invalidate_airport_cache()
    return ApiResponse(message="Airport updated successfully", data=AirportResponse.model_validate(airport))


@router.delete("/airports/{airport_id}", response_model=ApiResponse[None])
async def delete_airport(airport_id: int, db: AsyncSession = Depends(get_db)):
    await airport_service.delete_airport(db, airport_id)
    await invalidate_airport_cache()
    return ApiResponse(message="Airport deleted successfully")


# Bookings and payments

@router.get("/bookings", response_model=ApiResponse[list[BookingResponse]])
async def list_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[BookingStatus] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    bookings, total = await booking_service.list_all_bookings(db, page, limit, status)
    return ApiResponse(
        data=[BookingResponse.model_validate(b) for b in bookings],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/bookings/{booking_id}", response_model=ApiResponse[BookingDetail])
async def get_booking(
    booking_id: int,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await booking_service.get_booking_detail(db, booking_id, admin))


@router.get("/payments", response_model=ApiResponse[list[PaymentResponse]])
async def list_payments(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[PaymentStatus] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    payments, total = await payment_service.list_payments(db, page, limit, status)
    return ApiResponse(
        data=[PaymentResponse.model_validate(p) for p in payments],
        pagination=Pagination.build(page, limit, total),
    )


# Clients

@router.get("/clients", response_model=ApiResponse[list[ClientResponse]])
async def list_clients(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    clients, total = await auth_service.list_clients(db, page, limit)
    return ApiResponse(
        data=[ClientResponse.model_validate(c) for c in clients],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/clients/{client_id}", response_model=ApiResponse[ClientResponse])
async def get_client(client_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=ClientResponse.model_validate(await auth_service.get_client(db, client_id)))


@router.patch("/clients/{client_id}", response_model=ApiResponse[ClientResponse])
async def update_client(client_id: int, data: ClientAdminUpdate, db: AsyncSession = Depends(get_db)):
    client = await auth_service.admin_update_client(db, client_id, data)
    return ApiResponse(message="Client updated successfully", data=ClientResponse.model_validate(client))
