"""
Booking service: validation, seat-safe creation, modification window,
cancellation.

SEAT ALLOCATION
===============

Problem:
  Seats are airplane-level rows; "seat 12A is taken on flight 7" is only
  implied by a passenger row. A read-then-insert check lets two concurrent
  requests both see 12A as free and both insert a passenger for it.

Solution:
  1. Advisory check before the transaction: report every requested seat
     that is already held so the client gets one complete 409.
  2. The passengers table carries a partial unique index on
     (flight_id, seat_id) WHERE holds_seat. Booking + passenger inserts run
     in one transaction; if a concurrent booking claimed a seat between
     the check and the insert, the index rejects it, the whole transaction
     rolls back (no booking row survives) and the caller gets 409.
  3. Cancelling a booking clears holds_seat on its passengers in the same
     transaction as the status change, which releases the seats.
  4. booking_no is unique too. A reference taken by a concurrent booking
     fails the same transaction; it is retried with a fresh reference
     instead of being reported as a seat conflict.

Cost:
  total = sum(seat price) + SUPPORT_SURCHARGE if support == "yes"
                          + FASTTRACK_SURCHARGE if fasttrack == "yes"
"""

import secrets
import string
import time
from datetime import timedelta
from decimal import Decimal
from typing import Any, Iterable, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from airline import repositories as repo
from airline.core.clock import age_on, as_utc, parse_date, utcnow
from airline.core.config import get_settings
from airline.core.crypto import encrypt_value
from airline.core.errors import AuthorizationError, BadRequestError, ConflictError, ValidationError
from airline.core.logging import get_logger
from airline.core.metrics import booking_latency, record_booking_attempt
from airline.core.security import CurrentUser
from airline.models import Booking, Flight, Passenger, Payment, Seat
from airline.models.enums import BookingStatus, FlightStatus, Gender
from airline.schemas.booking import (
    BookingCreate,
    BookingCreated,
    BookingDetail,
    BookingResponse,
    BookingStatusUpdate,
    BookingUpdate,
    PassengerInput,
)
from airline.services import payment_ledger
from airline.services.seat_service import check_seats_availability, get_flight_or_404, seats_for_flight
from airline.services.views import load_flight_detail, load_passengers

logger = get_logger(__name__)
settings = get_settings()

GENDERS = {g.value for g in Gender}
CLOSED_STATUSES = {BookingStatus.CANCELLED.value, BookingStatus.COMPLETED.value}
MAX_BOOKING_ATTEMPTS = 3


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def validate_booking_data(data: BookingCreate) -> list[str]:
    """
    Check the shape of a booking request and return every problem found.
    An empty list means the request may proceed to availability checks.
    """
    errors = []
    if not data.flight_id or data.flight_id <= 0:
        errors.append("Valid flight ID is required")

    if not data.passengers:
        errors.append("At least one passenger is required")
    elif len(data.passengers) > settings.MAX_PASSENGERS_PER_BOOKING:
        errors.append(f"Maximum {settings.MAX_PASSENGERS_PER_BOOKING} passengers per booking")

    for index, passenger in enumerate(data.passengers, start=1):
        if _blank(passenger.firstname):
            errors.append(f"Passenger {index}: First name is required")
        if _blank(passenger.lastname):
            errors.append(f"Passenger {index}: Last name is required")
        if _blank(passenger.passport_no):
            errors.append(f"Passenger {index}: Passport number is required")
        if _blank(passenger.nationality):
            errors.append(f"Passenger {index}: Nationality is required")
        if passenger.gender not in GENDERS:
            errors.append(f"Passenger {index}: Valid gender is required")
        if parse_date(passenger.dob) is None:
            errors.append(f"Passenger {index}: Valid date of birth is required")
        if not passenger.seat_id or passenger.seat_id <= 0:
            errors.append(f"Passenger {index}: Valid seat selection is required")
    return errors


def validate_passenger_details(passenger: PassengerInput, index: int = 1) -> list[str]:
    """Rules beyond presence: plausible age and baggage allowance."""
    errors = []
    dob = parse_date(passenger.dob)
    if dob is not None:
        age = age_on(dob)
        if age < 0 or age > 120:
            errors.append(f"Passenger {index}: Date of birth must give an age between 0 and 120")
    if not 0 <= passenger.weight_limit <= 50:
        errors.append(f"Passenger {index}: Weight limit must be between 0 and 50 kg")
    return errors


def calculate_booking_cost(seat_prices: Iterable[Any], support: str = "no", fasttrack: str = "no") -> Decimal:
    total = sum((Decimal(str(price)) for price in seat_prices), Decimal("0"))
    if support == "yes":
        total += settings.SUPPORT_SURCHARGE
    if fasttrack == "yes":
        total += settings.FASTTRACK_SURCHARGE
    return total.quantize(Decimal("0.01"))


async def booking_total_cost(db: AsyncSession, booking: Booking) -> Decimal:
    result = await db.execute(
        select(Seat.price)
        .join(Passenger, Passenger.seat_id == Seat.seat_id)
        .where(Passenger.booking_id == booking.booking_id)
    )
    return calculate_booking_cost(result.scalars().all(), booking.support, booking.fasttrack)


def can_modify_booking(booking: Booking, flight: Flight) -> bool:
    if booking.status in CLOSED_STATUSES:
        return False
    window = timedelta(hours=settings.MODIFICATION_WINDOW_HOURS)
    return as_utc(flight.depart_when) - utcnow() > window


def generate_booking_no() -> str:
    alphabet = string.ascii_uppercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(6))


async def unused_booking_no(db: AsyncSession) -> str:
    """Draw booking references until one is not on file."""
    booking_no = generate_booking_no()
    for _ in range(MAX_BOOKING_ATTEMPTS):
        if not await repo.bookings.exists(db, booking_no=booking_no):
            break
        booking_no = generate_booking_no()
    return booking_no


def _is_booking_no_collision(error: IntegrityError) -> bool:
    # SQLite names the column, Postgres the index (ix_bookings_booking_no)
    return "booking_no" in str(error.orig)


async def get_owned_booking(db: AsyncSession, booking_id: int, user: CurrentUser) -> Booking:
    """Load a booking the caller may see: its owner, or any admin."""
    booking = await repo.bookings.get_or_404(db, booking_id, code="BOOKING_NOT_FOUND")
    if booking.client_id != user.client_id and not user.is_admin:
        raise AuthorizationError("Access denied to this booking", code="ACCESS_DENIED")
    return booking


async def _insert_booking(
    db: AsyncSession,
    client_id: int,
    data: BookingCreate,
    booking_no: str,
) -> tuple[Booking, list[Passenger]]:
    booking = Booking(
        booking_no=booking_no,
        support=data.support,
        fasttrack=data.fasttrack,
        status=BookingStatus.PENDING.value,
        client_id=client_id,
        flight_id=data.flight_id,
    )
    db.add(booking)
    await db.flush()

    passengers = []
    for item in data.passengers:
        passenger = Passenger(
            firstname=item.firstname.strip(),
            lastname=item.lastname.strip(),
            passport_no=encrypt_value(item.passport_no.strip()),
            nationality=item.nationality.strip(),
            phone_no=item.phone_no,
            gender=item.gender,
            dob=parse_date(item.dob),
            weight_limit=item.weight_limit,
            seat_id=item.seat_id,
            booking_id=booking.booking_id,
            flight_id=data.flight_id,
            holds_seat=True,
        )
        db.add(passenger)
        passengers.append(passenger)
    await db.flush()
    return booking, passengers


async def create_booking_with_passengers(
    db: AsyncSession,
    client_id: int,
    data: BookingCreate,
) -> tuple[Booking, list[Passenger]]:
    """
    Insert the booking and all its passengers as one unit of work.

    Any failure rolls back everything. A held-seat collision is a 409
    SEAT_CONFLICT; a booking reference taken by a concurrent booking is
    retried with a fresh reference.
    """
    for attempt in range(1, MAX_BOOKING_ATTEMPTS + 1):
        booking_no = await unused_booking_no(db)
        try:
            booking, passengers = await _insert_booking(db, client_id, data, booking_no)
            await db.commit()
            return booking, passengers
        except IntegrityError as e:
            await db.rollback()
            if _is_booking_no_collision(e):
                logger.info("booking_retry", booking_no=booking_no, attempt=attempt, reason="booking_no_taken")
                continue
            logger.warning("booking_seat_collision", client_id=client_id, flight_id=data.flight_id, error=str(e.orig))
            raise ConflictError(
                "One or more selected seats were just booked by someone else",
                code="SEAT_CONFLICT",
                details={"seat_ids": [p.seat_id for p in data.passengers]},
            )
        except Exception:
            await db.rollback()
            raise

    raise ConflictError(
        "Could not allocate a booking reference, please try again",
        code="BOOKING_REFERENCE_CONFLICT",
    )


async def book_flight(db: AsyncSession, user: CurrentUser, data: BookingCreate) -> BookingCreated:
    """Validate, check the flight and seats, then create the booking."""
    started = time.perf_counter()

    errors = validate_booking_data(data)
    for index, passenger in enumerate(data.passengers, start=1):
        errors.extend(validate_passenger_details(passenger, index))
    seat_ids = [p.seat_id for p in data.passengers]
    if len(set(seat_ids)) != len(seat_ids):
        errors.append("Each passenger must select a different seat")
    if errors:
        record_booking_attempt("rejected")
        raise ValidationError("Validation failed", details=errors)

    flight = await get_flight_or_404(db, data.flight_id)
    if flight.status != FlightStatus.SCHEDULED.value:
        record_booking_attempt("rejected")
        raise BadRequestError("Flight is not available for booking", code="FLIGHT_NOT_AVAILABLE")
    if as_utc(flight.depart_when) <= utcnow():
        record_booking_attempt("rejected")
        raise BadRequestError("Cannot book a flight that has already departed", code="FLIGHT_DEPARTED")

    seats = await seats_for_flight(db, flight, seat_ids)
    foreign = [seat_id for seat_id in seat_ids if seat_id not in seats]
    if foreign:
        record_booking_attempt("rejected")
        raise BadRequestError(
            "Selected seats do not exist on this flight",
            code="INVALID_SEAT",
            details={"seat_ids": foreign},
        )

    unavailable = await check_seats_availability(db, flight.flight_id, seat_ids)
    if unavailable:
        record_booking_attempt("conflict")
        logger.warning("booking_seats_unavailable", flight_id=flight.flight_id, seats=unavailable)
        raise ConflictError(
            "Some selected seats are no longer available",
            code="SEAT_CONFLICT",
            details={"unavailable_seats": unavailable},
        )

    # Priced before the transaction: a retried insert rolls back and expires loaded rows
    total_cost = calculate_booking_cost((seats[s].price for s in seat_ids), data.support, data.fasttrack)

    try:
        booking, passengers = await create_booking_with_passengers(db, user.client_id, data)
    except ConflictError:
        record_booking_attempt("conflict")
        raise

    booking_latency.observe(time.perf_counter() - started)
    record_booking_attempt("success")
    logger.info(
        "booking_created",
        booking_id=booking.booking_id,
        booking_no=booking.booking_no,
        client_id=user.client_id,
        flight_id=data.flight_id,
        passengers=len(passengers),
        total_cost=str(total_cost),
    )

    return BookingCreated(
        booking=BookingResponse.model_validate(booking),
        passengers=await load_passengers(db, Passenger.booking_id == booking.booking_id),
        total_cost=float(total_cost),
    )


async def list_client_bookings(db: AsyncSession, client_id: int, page: int, limit: int) -> tuple[list[Booking], int]:
    return await repo.bookings.paginate(
        db,
        page,
        limit,
        order_by=(Booking.created_at.desc(), Booking.booking_id.desc()),
        client_id=client_id,
    )


async def list_all_bookings(
    db: AsyncSession,
    page: int,
    limit: int,
    status: Optional[BookingStatus] = None,
) -> tuple[list[Booking], int]:
    conditions = {"status": status.value} if status else {}
    return await repo.bookings.paginate(
        db,
        page,
        limit,
        order_by=(Booking.created_at.desc(), Booking.booking_id.desc()),
        **conditions,
    )


async def get_booking_detail(db: AsyncSession, booking_id: int, user: CurrentUser) -> BookingDetail:
    booking = await get_owned_booking(db, booking_id, user)
    flight = await get_flight_or_404(db, booking.flight_id)
    latest = await payment_ledger.latest_payment(db, booking_id)

    return BookingDetail(
        booking=BookingResponse.model_validate(booking),
        flight=await load_flight_detail(db, booking.flight_id),
        passengers=await load_passengers(db, Passenger.booking_id == booking_id),
        payment_status=latest.status if latest else None,
        total_cost=float(await booking_total_cost(db, booking)),
        can_modify=can_modify_booking(booking, flight),
    )


async def ensure_modifiable(db: AsyncSession, booking: Booking, user: CurrentUser, code: str = "MODIFICATION_NOT_ALLOWED") -> Flight:
    if booking.client_id != user.client_id and not user.is_admin:
        raise AuthorizationError("Access denied to this booking", code="ACCESS_DENIED")
    flight = await get_flight_or_404(db, booking.flight_id)
    if not can_modify_booking(booking, flight):
        raise AuthorizationError(
            f"Booking cannot be modified within {settings.MODIFICATION_WINDOW_HOURS} hours of departure "
            "or once it is cancelled or completed",
            code=code,
        )
    return flight


async def update_booking(db: AsyncSession, booking_id: int, user: CurrentUser, data: BookingUpdate) -> Booking:
    booking = await repo.bookings.get_or_404(db, booking_id, code="BOOKING_NOT_FOUND")
    await ensure_modifiable(db, booking, user)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if changes:
        await repo.bookings.update(db, booking, **changes)
        await db.commit()
    logger.info("booking_updated", booking_id=booking_id, fields=sorted(changes))
    return booking


async def release_seats(db: AsyncSession, booking_id: int) -> None:
    await db.execute(
        update(Passenger)
        .where(Passenger.booking_id == booking_id)
        .values(holds_seat=False)
        .execution_options(synchronize_session="fetch")
    )


async def update_booking_status(db: AsyncSession, booking_id: int, data: BookingStatusUpdate) -> Booking:
    """Admin status override. Cancelling releases seats; reopening is refused."""
    booking = await repo.bookings.get_or_404(db, booking_id, code="BOOKING_NOT_FOUND")
    previous = booking.status
    new_status = data.status.value

    if previous == BookingStatus.CANCELLED.value and new_status != previous:
        raise ConflictError("Cancelled bookings cannot be reopened", code="INVALID_STATUS_TRANSITION")

    if new_status == BookingStatus.CANCELLED.value:
        await release_seats(db, booking_id)
    await repo.bookings.update(db, booking, status=new_status)
    await db.commit()

    logger.info("booking_status_changed", booking_id=booking_id, old_status=previous, new_status=new_status)
    return booking


async def cancel_booking(db: AsyncSession, booking_id: int, user: CurrentUser) -> tuple[Booking, Optional[Payment]]:
    """
    Cancel a booking and release its seats. If it was paid, the refund row
    is written in the same transaction. Nothing is deleted.
    """
    booking = await repo.bookings.get_or_404(db, booking_id, code="BOOKING_NOT_FOUND")
    if booking.client_id != user.client_id and not user.is_admin:
        raise AuthorizationError("Access denied to this booking", code="ACCESS_DENIED")
    if booking.status == BookingStatus.CANCELLED.value:
        raise BadRequestError("Booking is already cancelled", code="ALREADY_CANCELLED")
    await ensure_modifiable(db, booking, user, code="CANCELLATION_NOT_ALLOWED")

    paid = await payment_ledger.completed_payment(db, booking_id)
    refund = None
    try:
        if paid is not None:
            refund = await payment_ledger.add_refund(db, paid)
        await release_seats(db, booking_id)
        await repo.bookings.update(db, booking, status=BookingStatus.CANCELLED.value)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "booking_cancelled",
        booking_id=booking_id,
        client_id=booking.client_id,
        refunded=str(-refund.amount) if refund else None,
    )
    return booking, refund


async def count_passengers(db: AsyncSession, booking_id: int) -> int:
    result = await db.execute(
        select(func.count()).select_from(Passenger).where(Passenger.booking_id == booking_id)
    )
    return result.scalar_one()
