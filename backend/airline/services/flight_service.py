"""
Flight search (public) and flight scheduling (admin).

Search joins each flight to a per-airplane count of seats in the requested
cabin and a per-flight count of those seats currently held, so available
seats come out of one query instead of one query per flight.
"""

from datetime import datetime, time, timedelta, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from airline import repositories as repo
from airline.core.clock import as_utc, utcnow
from airline.core.errors import BadRequestError, ConflictError, NotFoundError
from airline.core.logging import get_logger
from airline.models import Booking, Flight, Passenger, Seat
from airline.models.enums import BookingStatus, FlightStatus, seat_class_variants
from airline.schemas.booking import PassengerResponse
from airline.schemas.flight import (
    FlightCreate,
    FlightDetail,
    FlightSearchParams,
    FlightSearchResult,
    FlightStats,
    FlightStatusUpdate,
    FlightUpdate,
)
from airline.services.views import flight_detail_query, load_flight_detail, load_passengers, to_flight_detail

logger = get_logger(__name__)


async def search_flights(db: AsyncSession, params: FlightSearchParams) -> list[FlightSearchResult]:
    if not params.depart_airport_id or not params.arrive_airport_id:
        raise BadRequestError("Departure and arrival airports are required", code="MISSING_PARAMETERS")
    if not params.depart_date:
        raise BadRequestError("Departure date is required", code="MISSING_PARAMETERS")
    if params.depart_airport_id == params.arrive_airport_id:
        raise BadRequestError("Departure and arrival airports must be different", code="INVALID_ROUTE")

    for airport_id in (params.depart_airport_id, params.arrive_airport_id):
        if not await repo.airports.exists(db, airport_id=airport_id):
            raise NotFoundError("Airport", code="AIRPORT_NOT_FOUND")

    variants = seat_class_variants(params.seat_class)
    cabin = (
        select(
            Seat.airplane_id,
            func.count(Seat.seat_id).label("total"),
            func.min(Seat.price).label("min_price"),
        )
        .where(Seat.seat_class.in_(variants))
        .group_by(Seat.airplane_id)
        .subquery()
    )
    held = (
        select(Passenger.flight_id, func.count(Passenger.passenger_id).label("held"))
        .join(Booking, Booking.booking_id == Passenger.booking_id)
        .join(Seat, Seat.seat_id == Passenger.seat_id)
        .where(Booking.status != BookingStatus.CANCELLED.value, Seat.seat_class.in_(variants))
        .group_by(Passenger.flight_id)
        .subquery()
    )

    day_start = datetime.combine(params.depart_date, time.min, tzinfo=timezone.utc)
    day_end = day_start + timedelta(days=1)
    query = (
        flight_detail_query()
        .add_columns(
            func.coalesce(cabin.c.total, 0).label("total"),
            func.coalesce(held.c.held, 0).label("held"),
            cabin.c.min_price,
        )
        .outerjoin(cabin, cabin.c.airplane_id == Flight.airplane_id)
        .outerjoin(held, held.c.flight_id == Flight.flight_id)
        .where(
            Flight.depart_airport_id == params.depart_airport_id,
            Flight.arrive_airport_id == params.arrive_airport_id,
            Flight.status == FlightStatus.SCHEDULED.value,
            Flight.depart_when >= max(day_start, utcnow()),
            Flight.depart_when < day_end,
        )
        .order_by(Flight.depart_when)
    )

    results = []
    for flight, depart, arrive, airplane, total, held_count, min_price in (await db.execute(query)).all():
        available = total - held_count
        if available < params.passengers:
            continue
        results.append(
            FlightSearchResult(
                **to_flight_detail(
                    flight,
                    depart,
                    arrive,
                    airplane,
                    seat_class=params.seat_class.value,
                    available_seats=available,
                    min_price=float(min_price) if min_price is not None else None,
                )
            )
        )

    logger.info(
        "flight_search",
        depart_airport_id=params.depart_airport_id,
        arrive_airport_id=params.arrive_airport_id,
        depart_date=str(params.depart_date),
        results=len(results),
    )
    return results


async def get_flight_detail(db: AsyncSession, flight_id: int) -> FlightDetail:
    return await load_flight_detail(db, flight_id)


async def list_flights(
    db: AsyncSession,
    page: int,
    limit: int,
    status: Optional[FlightStatus] = None,
) -> tuple[list[FlightDetail], int]:
    query = flight_detail_query()
    count_query = select(func.count()).select_from(Flight)
    if status:
        query = query.where(Flight.status == status.value)
        count_query = count_query.where(Flight.status == status.value)

    total = (await db.execute(count_query)).scalar_one()
    rows = await db.execute(
        query.order_by(Flight.depart_when.desc()).offset((page - 1) * limit).limit(limit)
    )
    return [FlightDetail(**to_flight_detail(*row)) for row in rows.all()], total


async def _check_schedule(
    db: AsyncSession,
    airplane_id: int,
    depart_airport_id: int,
    arrive_airport_id: int,
    depart_when: datetime,
    arrive_when: datetime,
    exclude_flight_id: Optional[int] = None,
) -> None:
    if as_utc(arrive_when) <= as_utc(depart_when):
        raise BadRequestError("Arrival time must be after departure time", code="INVALID_SCHEDULE")
    if depart_airport_id == arrive_airport_id:
        raise BadRequestError("Departure and arrival airports must be different", code="INVALID_ROUTE")

    await repo.airplanes.get_or_404(db, airplane_id, code="AIRPLANE_NOT_FOUND")
    for airport_id in (depart_airport_id, arrive_airport_id):
        await repo.airports.get_or_404(db, airport_id, code="AIRPORT_NOT_FOUND")

    overlap = select(Flight.flight_id).where(
        Flight.airplane_id == airplane_id,
        Flight.status != FlightStatus.CANCELLED.value,
        Flight.depart_when < as_utc(arrive_when),
        Flight.arrive_when > as_utc(depart_when),
    )
    if exclude_flight_id is not None:
        overlap = overlap.where(Flight.flight_id != exclude_flight_id)
    clash = (await db.execute(overlap.limit(1))).scalar_one_or_none()
    if clash is not None:
        raise ConflictError(
            "Airplane is already scheduled during this time",
            code="AIRPLANE_UNAVAILABLE",
            details={"conflicting_flight_id": clash},
        )


async def create_flight(db: AsyncSession, data: FlightCreate) -> FlightDetail:
    if as_utc(data.depart_when) <= utcnow():
        raise BadRequestError("Departure time must be in the future", code="INVALID_SCHEDULE")

    await _check_schedule(
        db,
        data.airplane_id,
        data.depart_airport_id,
        data.arrive_airport_id,
        data.depart_when,
        data.arrive_when,
    )

    flight = await repo.flights.create(
        db,
        flight_no=data.flight_no,
        depart_when=as_utc(data.depart_when),
        arrive_when=as_utc(data.arrive_when),
        status=data.status.value,
        airplane_id=data.airplane_id,
        depart_airport_id=data.depart_airport_id,
        arrive_airport_id=data.arrive_airport_id,
    )
    await db.commit()
    logger.info("flight_created", flight_id=flight.flight_id, flight_no=flight.flight_no)
    return await load_flight_detail(db, flight.flight_id)


async def update_flight(db: AsyncSession, flight_id: int, data: FlightUpdate) -> FlightDetail:
    flight = await repo.flights.get_or_404(db, flight_id, code="FLIGHT_NOT_FOUND")
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "status" in changes:
        changes["status"] = changes["status"].value

    schedule_fields = {"airplane_id", "depart_airport_id", "arrive_airport_id", "depart_when", "arrive_when"}
    if schedule_fields & changes.keys():
        merged = {field: changes.get(field, getattr(flight, field)) for field in schedule_fields}
        await _check_schedule(db, exclude_flight_id=flight_id, **merged)
        for field in ("depart_when", "arrive_when"):
            if field in changes:
                changes[field] = as_utc(changes[field])

    await repo.flights.update(db, flight, **changes)
    await db.commit()
    logger.info("flight_updated", flight_id=flight_id, fields=sorted(changes))
    return await load_flight_detail(db, flight_id)


async def update_flight_status(db: AsyncSession, flight_id: int, data: FlightStatusUpdate) -> FlightDetail:
    flight = await repo.flights.get_or_404(db, flight_id, code="FLIGHT_NOT_FOUND")
    previous = flight.status
    await repo.flights.update(db, flight, status=data.status.value)
    await db.commit()
    logger.info("flight_status_changed", flight_id=flight_id, old_status=previous, new_status=flight.status)
    return await load_flight_detail(db, flight_id)


async def delete_flight(db: AsyncSession, flight_id: int) -> None:
    """
    Delete a flight that nothing refers to. Active bookings block deletion;
    so do cancelled ones, since their rows are kept as history.
    """
    flight = await repo.flights.get_or_404(db, flight_id, code="FLIGHT_NOT_FOUND")

    active = await db.execute(
        select(func.count())
        .select_from(Booking)
        .where(Booking.flight_id == flight_id, Booking.status != BookingStatus.CANCELLED.value)
    )
    if active.scalar_one():
        raise ConflictError("Cannot delete flight with active bookings", code="FLIGHT_HAS_BOOKINGS")
    if await repo.bookings.exists(db, flight_id=flight_id):
        raise ConflictError(
            "Flight has cancelled bookings on record; set its status to Cancelled instead",
            code="FLIGHT_HAS_BOOKING_HISTORY",
        )

    await repo.flights.delete(db, flight)
    await db.commit()
    logger.info("flight_deleted", flight_id=flight_id)


async def flight_stats(db: AsyncSession) -> FlightStats:
    rows = await db.execute(select(Flight.status, func.count()).group_by(Flight.status))
    by_status = {status: count for status, count in rows.all()}
    upcoming = await db.execute(
        select(func.count()).select_from(Flight).where(Flight.depart_when > utcnow())
    )
    return FlightStats(total=sum(by_status.values()), by_status=by_status, upcoming=upcoming.scalar_one())


async def flight_passengers(db: AsyncSession, flight_id: int) -> list[PassengerResponse]:
    await repo.flights.get_or_404(db, flight_id, code="FLIGHT_NOT_FOUND")
    return await load_passengers(
        db,
        Passenger.flight_id == flight_id,
        Passenger.booking_id.in_(
            select(Booking.booking_id).where(
                Booking.flight_id == flight_id, Booking.status != BookingStatus.CANCELLED.value
            )
        ),
    )
