"""
Baggage check-in and tracking.

Tracking numbers are "BG" + the last 8 digits of the epoch-millisecond
clock + 3 random digits; the unique index on tracking_no is the final
guard against the (rare) collision.
"""

import secrets
import time
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from airline import repositories as repo
from airline.core.errors import ConflictError, NotFoundError
from airline.core.logging import get_logger
from airline.core.security import CurrentUser
from airline.models import Baggage, Flight, Passenger
from airline.models.enums import BaggageStatus
from airline.schemas.baggage import BaggageCreate, BaggageResponse, BaggageStatusUpdate, BaggageTracking
from airline.services.booking_service import get_owned_booking
from airline.services.views import ArriveAirport, DepartAirport

logger = get_logger(__name__)

TRACKING_PREFIX = "BG"


def generate_tracking_no() -> str:
    millis = str(int(time.time() * 1000))[-8:]
    return f"{TRACKING_PREFIX}{millis}{secrets.randbelow(1000):03d}"


def _tracking_query():
    return (
        select(Baggage, Passenger, Flight, DepartAirport.iata_code, ArriveAirport.iata_code)
        .join(Passenger, Passenger.passenger_id == Baggage.passenger_id)
        .join(Flight, Flight.flight_id == Passenger.flight_id)
        .join(DepartAirport, DepartAirport.airport_id == Flight.depart_airport_id)
        .join(ArriveAirport, ArriveAirport.airport_id == Flight.arrive_airport_id)
    )


def _to_tracking(row) -> BaggageTracking:
    bag, passenger, flight, depart_iata, arrive_iata = row
    return BaggageTracking(
        **BaggageResponse.model_validate(bag).model_dump(),
        passenger_name=f"{passenger.firstname} {passenger.lastname}",
        flight_no=flight.flight_no,
        flight_status=flight.status,
        depart_iata=depart_iata,
        arrive_iata=arrive_iata,
    )


async def _tracking_rows(db: AsyncSession, *conditions) -> list[BaggageTracking]:
    result = await db.execute(_tracking_query().where(*conditions).order_by(Baggage.baggage_id))
    return [_to_tracking(row) for row in result.all()]


async def track(db: AsyncSession, tracking_no: str) -> BaggageTracking:
    rows = await _tracking_rows(db, Baggage.tracking_no == tracking_no.upper())
    if not rows:
        raise NotFoundError("Baggage", code="BAGGAGE_NOT_FOUND")
    return rows[0]


async def get_baggage(db: AsyncSession, baggage_id: int, user: CurrentUser) -> BaggageTracking:
    rows = await _tracking_rows(db, Baggage.baggage_id == baggage_id)
    if not rows:
        raise NotFoundError("Baggage", code="BAGGAGE_NOT_FOUND")
    passenger = await repo.passengers.get(db, rows[0].passenger_id)
    await get_owned_booking(db, passenger.booking_id, user)
    return rows[0]


async def passenger_baggage(db: AsyncSession, passenger_id: int, user: CurrentUser) -> list[BaggageTracking]:
    passenger = await repo.passengers.get_or_404(db, passenger_id, code="PASSENGER_NOT_FOUND")
    await get_owned_booking(db, passenger.booking_id, user)
    return await _tracking_rows(db, Baggage.passenger_id == passenger_id)


async def flight_baggage(db: AsyncSession, flight_id: int) -> list[BaggageTracking]:
    await repo.flights.get_or_404(db, flight_id, code="FLIGHT_NOT_FOUND")
    return await _tracking_rows(db, Passenger.flight_id == flight_id)


async def baggage_by_status(db: AsyncSession, status: BaggageStatus) -> list[BaggageTracking]:
    return await _tracking_rows(db, Baggage.status == status.value)


async def search_baggage(
    db: AsyncSession,
    tracking_no: Optional[str] = None,
    passenger_name: Optional[str] = None,
    flight_no: Optional[str] = None,
    status: Optional[BaggageStatus] = None,
) -> list[BaggageTracking]:
    conditions = []
    if tracking_no:
        conditions.append(Baggage.tracking_no.like(f"%{tracking_no.upper()}%"))
    if passenger_name:
        pattern = f"%{passenger_name.lower()}%"
        conditions.append(
            or_(func.lower(Passenger.firstname).like(pattern), func.lower(Passenger.lastname).like(pattern))
        )
    if flight_no:
        conditions.append(Flight.flight_no == flight_no.upper())
    if status:
        conditions.append(Baggage.status == status.value)
    return await _tracking_rows(db, *conditions)


async def baggage_stats(db: AsyncSession) -> dict[str, int]:
    rows = await db.execute(select(Baggage.status, func.count()).group_by(Baggage.status))
    counts = {status.value: 0 for status in BaggageStatus}
    counts.update({status: count for status, count in rows.all()})
    counts["total"] = sum(counts.values())
    return counts


async def create_baggage(db: AsyncSession, data: BaggageCreate) -> BaggageTracking:
    await repo.passengers.get_or_404(db, data.passenger_id, code="PASSENGER_NOT_FOUND")

    tracking_no = generate_tracking_no()
    if await repo.baggage.exists(db, tracking_no=tracking_no):
        raise ConflictError("Tracking number collision, please retry", code="TRACKING_NUMBER_EXISTS")

    try:
        bag = await repo.baggage.create(
            db,
            tracking_no=tracking_no,
            status=data.status.value,
            weight=data.weight,
            passenger_id=data.passenger_id,
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Tracking number collision, please retry", code="TRACKING_NUMBER_EXISTS")

    logger.info("baggage_checked_in", baggage_id=bag.baggage_id, tracking_no=tracking_no, passenger_id=data.passenger_id)
    return await track(db, tracking_no)


async def _set_status(db: AsyncSession, bag: Baggage, data: BaggageStatusUpdate) -> BaggageTracking:
    previous = bag.status
    await repo.baggage.update(db, bag, status=data.status.value)
    await db.commit()
    logger.info("baggage_status_changed", baggage_id=bag.baggage_id, old_status=previous, new_status=bag.status)
    if bag.status == BaggageStatus.LOST.value:
        logger.warning("baggage_reported_lost", baggage_id=bag.baggage_id, tracking_no=bag.tracking_no)
    return await track(db, bag.tracking_no)


async def update_status(db: AsyncSession, baggage_id: int, data: BaggageStatusUpdate) -> BaggageTracking:
    bag = await repo.baggage.get_or_404(db, baggage_id, code="BAGGAGE_NOT_FOUND")
    return await _set_status(db, bag, data)


async def update_status_by_tracking(db: AsyncSession, tracking_no: str, data: BaggageStatusUpdate) -> BaggageTracking:
    bag = await repo.baggage.find_one(db, tracking_no=tracking_no.upper())
    if bag is None:
        raise NotFoundError("Baggage", code="BAGGAGE_NOT_FOUND")
    return await _set_status(db, bag, data)


async def delete_baggage(db: AsyncSession, baggage_id: int) -> None:
    bag = await repo.baggage.get_or_404(db, baggage_id, code="BAGGAGE_NOT_FOUND")
    await repo.baggage.delete(db, bag)
    await db.commit()
    logger.info("baggage_deleted", baggage_id=baggage_id)
