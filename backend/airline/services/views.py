"""
Assembly of joined read models (flight detail, passenger lists) shared by
several services.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import aliased
from sqlalchemy.ext.asyncio import AsyncSession

from airline.core.clock import format_duration
from airline.core.crypto import mask_encrypted
from airline.core.errors import NotFoundError
from airline.models import Airplane, Airport, Flight, Passenger, Seat
from airline.schemas.airplane import AirplaneResponse
from airline.schemas.airport import AirportResponse
from airline.schemas.booking import PassengerResponse
from airline.schemas.flight import FlightDetail, FlightResponse

DepartAirport = aliased(Airport, name="depart_airport")
ArriveAirport = aliased(Airport, name="arrive_airport")


def flight_detail_query():
    return (
        select(Flight, DepartAirport, ArriveAirport, Airplane)
        .join(DepartAirport, DepartAirport.airport_id == Flight.depart_airport_id)
        .join(ArriveAirport, ArriveAirport.airport_id == Flight.arrive_airport_id)
        .join(Airplane, Airplane.airplane_id == Flight.airplane_id)
    )


def to_flight_detail(flight: Flight, depart: Airport, arrive: Airport, airplane: Airplane, **extra) -> dict:
    return {
        **FlightResponse.model_validate(flight).model_dump(),
        "depart_airport": AirportResponse.model_validate(depart),
        "arrive_airport": AirportResponse.model_validate(arrive),
        "airplane": AirplaneResponse.model_validate(airplane),
        "duration": format_duration(flight.depart_when, flight.arrive_when),
        **extra,
    }


async def load_flight_detail(db: AsyncSession, flight_id: int) -> FlightDetail:
    row = (await db.execute(flight_detail_query().where(Flight.flight_id == flight_id))).first()
    if row is None:
        raise NotFoundError("Flight", code="FLIGHT_NOT_FOUND")
    return FlightDetail(**to_flight_detail(*row))


def to_passenger_response(passenger: Passenger, seat: Optional[Seat] = None) -> PassengerResponse:
    return PassengerResponse(
        passenger_id=passenger.passenger_id,
        firstname=passenger.firstname,
        lastname=passenger.lastname,
        passport_no=mask_encrypted(passenger.passport_no),
        nationality=passenger.nationality,
        phone_no=passenger.phone_no,
        gender=passenger.gender,
        dob=passenger.dob,
        weight_limit=passenger.weight_limit,
        seat_id=passenger.seat_id,
        seat_no=seat.seat_no if seat else None,
        seat_class=seat.seat_class if seat else None,
        booking_id=passenger.booking_id,
        flight_id=passenger.flight_id,
    )


async def load_passengers(db: AsyncSession, *conditions) -> list[PassengerResponse]:
    result = await db.execute(
        select(Passenger, Seat)
        .join(Seat, Seat.seat_id == Passenger.seat_id)
        .where(*conditions)
        .order_by(Passenger.passenger_id)
    )
    return [to_passenger_response(passenger, seat) for passenger, seat in result.all()]
