"""
Seat availability for a flight.

Seats belong to airplanes; occupancy belongs to flights. A seat is taken on
a flight when a passenger row for (flight, seat) belongs to a booking that
is not cancelled. Nothing is counted or cached: every answer is read from
the passenger and booking tables at request time.
"""

from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from airline import repositories as repo
from airline.models import Booking, Flight, Passenger, Seat
from airline.models.enums import SEAT_CLASS_ORDER, BookingStatus, normalize_seat_class
from airline.schemas.seat import FlightSeatMap, SeatClassSummary, SeatMapEntry


def held_seat_ids_query(flight_id: int, exclude_passenger_id: Optional[int] = None):
    query = (
        select(Passenger.seat_id)
        .join(Booking, Booking.booking_id == Passenger.booking_id)
        .where(
            Passenger.flight_id == flight_id,
            Booking.status != BookingStatus.CANCELLED.value,
        )
    )
    if exclude_passenger_id is not None:
        query = query.where(Passenger.passenger_id != exclude_passenger_id)
    return query


async def held_seat_ids(db: AsyncSession, flight_id: int, exclude_passenger_id: Optional[int] = None) -> set[int]:
    result = await db.execute(held_seat_ids_query(flight_id, exclude_passenger_id))
    return set(result.scalars().all())


async def check_seats_availability(
    db: AsyncSession,
    flight_id: int,
    seat_ids: Iterable[int],
    exclude_passenger_id: Optional[int] = None,
) -> list[int]:
    """Return the subset of seat_ids already held on the flight (order preserved)."""
    seat_ids = list(seat_ids)
    if not seat_ids:
        return []
    query = held_seat_ids_query(flight_id, exclude_passenger_id).where(Passenger.seat_id.in_(seat_ids))
    taken = set((await db.execute(query)).scalars().all())
    return [seat_id for seat_id in seat_ids if seat_id in taken]


async def seats_for_flight(db: AsyncSession, flight: Flight, seat_ids: Iterable[int]) -> dict[int, Seat]:
    """Seats among seat_ids that belong to the flight's airplane, keyed by id."""
    seat_ids = list(seat_ids)
    if not seat_ids:
        return {}
    result = await db.execute(
        select(Seat).where(Seat.seat_id.in_(seat_ids), Seat.airplane_id == flight.airplane_id)
    )
    return {seat.seat_id: seat for seat in result.scalars().all()}


async def get_flight_or_404(db: AsyncSession, flight_id: int) -> Flight:
    return await repo.flights.get_or_404(db, flight_id, code="FLIGHT_NOT_FOUND")


async def get_seat_map(db: AsyncSession, flight_id: int) -> FlightSeatMap:
    flight = await get_flight_or_404(db, flight_id)
    seats = await repo.seats.find_all(db, airplane_id=flight.airplane_id)
    held = await held_seat_ids(db, flight_id)

    seat_map: dict[str, dict[str, list[SeatMapEntry]]] = {}
    for seat in seats:
        seat_class = normalize_seat_class(seat.seat_class)
        label = seat_class.value if seat_class else seat.seat_class
        entry = SeatMapEntry(
            seat_id=seat.seat_id,
            seat_no=seat.seat_no,
            seat_class=label,
            price=float(seat.price),
            available=seat.seat_id not in held,
        )
        bucket = seat_map.setdefault(label, {"available": [], "booked": []})
        bucket["available" if entry.available else "booked"].append(entry)

    def order(label: str) -> int:
        seat_class = normalize_seat_class(label)
        return SEAT_CLASS_ORDER.get(seat_class, 99)

    summary = []
    for label in sorted(seat_map, key=order):
        bucket = seat_map[label]
        entries = bucket["available"] + bucket["booked"]
        prices = [e.price for e in entries]
        summary.append(
            SeatClassSummary(
                seat_class=label,
                total=len(entries),
                available=len(bucket["available"]),
                booked=len(bucket["booked"]),
                min_price=min(prices),
                max_price=max(prices),
            )
        )

    return FlightSeatMap(
        flight_id=flight.flight_id,
        airplane_id=flight.airplane_id,
        seat_map={label: seat_map[label] for label in sorted(seat_map, key=order)},
        summary=summary,
    )
