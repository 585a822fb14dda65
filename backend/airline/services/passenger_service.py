"""
Passenger maintenance on an existing booking.

Every change goes through the same modification window as the booking
itself. Adding or removing travellers changes the fare, so it is only
allowed while the booking is still awaiting payment.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from airline import repositories as repo
from airline.core.clock import age_on, parse_date
from airline.core.config import get_settings
from airline.core.crypto import encrypt_value
from airline.core.errors import BadRequestError, ConflictError, ValidationError
from airline.core.logging import get_logger
from airline.core.security import CurrentUser
from airline.models import Booking, Passenger
from airline.models.enums import BookingStatus
from airline.schemas.booking import BookingCreate, PassengerInput, PassengerResponse
from airline.schemas.passenger import PassengerUpdate
from airline.services.booking_service import (
    count_passengers,
    ensure_modifiable,
    get_owned_booking,
    validate_booking_data,
    validate_passenger_details,
)
from airline.services.seat_service import check_seats_availability, seats_for_flight
from airline.services.views import load_passengers, to_passenger_response

logger = get_logger(__name__)
settings = get_settings()


async def _load(db: AsyncSession, passenger_id: int, user: CurrentUser) -> tuple[Passenger, Booking]:
    passenger = await repo.passengers.get_or_404(db, passenger_id, code="PASSENGER_NOT_FOUND")
    booking = await get_owned_booking(db, passenger.booking_id, user)
    return passenger, booking


async def _response(db: AsyncSession, passenger: Passenger) -> PassengerResponse:
    seat = await repo.seats.get(db, passenger.seat_id)
    return to_passenger_response(passenger, seat)


def _require_pending(booking: Booking) -> None:
    if booking.status != BookingStatus.PENDING.value:
        raise BadRequestError(
            "Passengers can only be added or removed before payment",
            code="INVALID_BOOKING_STATUS",
        )


async def get_passenger(db: AsyncSession, passenger_id: int, user: CurrentUser) -> PassengerResponse:
    passenger, _ = await _load(db, passenger_id, user)
    return await _response(db, passenger)


async def list_booking_passengers(db: AsyncSession, booking_id: int, user: CurrentUser) -> list[PassengerResponse]:
    await get_owned_booking(db, booking_id, user)
    return await load_passengers(db, Passenger.booking_id == booking_id)


async def update_passenger(
    db: AsyncSession,
    passenger_id: int,
    user: CurrentUser,
    data: PassengerUpdate,
) -> PassengerResponse:
    passenger, booking = await _load(db, passenger_id, user)
    await ensure_modifiable(db, booking, user)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "dob" in changes and not 0 <= age_on(changes["dob"]) <= 120:
        raise ValidationError("Validation failed", details=["Date of birth must give an age between 0 and 120"])
    if "gender" in changes:
        changes["gender"] = changes["gender"].value
    if "passport_no" in changes:
        changes["passport_no"] = encrypt_value(changes["passport_no"].strip())

    await repo.passengers.update(db, passenger, **changes)
    await db.commit()
    logger.info("passenger_updated", passenger_id=passenger_id, fields=sorted(changes))
    return await _response(db, passenger)


async def change_seat(db: AsyncSession, passenger_id: int, user: CurrentUser, seat_id: int) -> PassengerResponse:
    passenger, booking = await _load(db, passenger_id, user)
    flight = await ensure_modifiable(db, booking, user)

    if seat_id == passenger.seat_id:
        return await _response(db, passenger)

    if seat_id not in await seats_for_flight(db, flight, [seat_id]):
        raise BadRequestError("Selected seat does not exist on this flight", code="INVALID_SEAT")
    if await check_seats_availability(db, flight.flight_id, [seat_id], exclude_passenger_id=passenger_id):
        raise ConflictError("Selected seat is not available", code="SEAT_NOT_AVAILABLE")

    previous = passenger.seat_id
    try:
        await repo.passengers.update(db, passenger, seat_id=seat_id)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Selected seat is not available", code="SEAT_NOT_AVAILABLE")

    logger.info("passenger_seat_changed", passenger_id=passenger_id, old_seat=previous, new_seat=seat_id)
    return await _response(db, passenger)


async def add_passenger(
    db: AsyncSession,
    booking_id: int,
    user: CurrentUser,
    data: PassengerInput,
) -> PassengerResponse:
    booking = await get_owned_booking(db, booking_id, user)
    flight = await ensure_modifiable(db, booking, user)
    _require_pending(booking)

    errors = validate_booking_data(BookingCreate(flight_id=booking.flight_id, passengers=[data]))
    errors.extend(validate_passenger_details(data))
    if errors:
        raise ValidationError("Validation failed", details=errors)

    if await count_passengers(db, booking_id) >= settings.MAX_PASSENGERS_PER_BOOKING:
        raise BadRequestError(
            f"A booking can have at most {settings.MAX_PASSENGERS_PER_BOOKING} passengers",
            code="MAX_PASSENGERS_REACHED",
        )
    if data.seat_id not in await seats_for_flight(db, flight, [data.seat_id]):
        raise BadRequestError("Selected seat does not exist on this flight", code="INVALID_SEAT")
    if await check_seats_availability(db, flight.flight_id, [data.seat_id]):
        raise ConflictError("Selected seat is not available", code="SEAT_NOT_AVAILABLE")

    try:
        passenger = await repo.passengers.create(
            db,
            firstname=data.firstname.strip(),
            lastname=data.lastname.strip(),
            passport_no=encrypt_value(data.passport_no.strip()),
            nationality=data.nationality.strip(),
            phone_no=data.phone_no,
            gender=data.gender,
            dob=parse_date(data.dob),
            weight_limit=data.weight_limit,
            seat_id=data.seat_id,
            booking_id=booking_id,
            flight_id=booking.flight_id,
            holds_seat=True,
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Selected seat is not available", code="SEAT_NOT_AVAILABLE")

    logger.info("passenger_added", passenger_id=passenger.passenger_id, booking_id=booking_id, seat_id=data.seat_id)
    return await _response(db, passenger)


async def remove_passenger(db: AsyncSession, passenger_id: int, user: CurrentUser) -> None:
    passenger, booking = await _load(db, passenger_id, user)
    await ensure_modifiable(db, booking, user)
    _require_pending(booking)

    if await count_passengers(db, booking.booking_id) <= 1:
        raise BadRequestError(
            "Cannot remove the last passenger; cancel the booking instead",
            code="LAST_PASSENGER",
        )
    if await repo.baggage.exists(db, passenger_id=passenger_id):
        raise ConflictError("Passenger has checked baggage", code="PASSENGER_HAS_BAGGAGE")

    await repo.passengers.delete(db, passenger)
    await db.commit()
    logger.info("passenger_removed", passenger_id=passenger_id, booking_id=booking.booking_id)

