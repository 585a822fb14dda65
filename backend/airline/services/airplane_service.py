"""
Airplane and seat inventory administration.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from airline import repositories as repo
from airline.core.errors import ConflictError
from airline.core.logging import get_logger
from airline.models import Airplane, Seat
from airline.models.enums import SEAT_CLASS_ORDER, normalize_seat_class
from airline.schemas.airplane import AirplaneCreate, AirplaneUpdate
from airline.schemas.seat import SeatCreate, SeatUpdate

logger = get_logger(__name__)


def _money(value: float) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


async def list_airplanes(db: AsyncSession, page: int, limit: int) -> tuple[list[Airplane], int]:
    return await repo.airplanes.paginate(db, page, limit)


async def get_airplane(db: AsyncSession, airplane_id: int) -> Airplane:
    return await repo.airplanes.get_or_404(db, airplane_id, code="AIRPLANE_NOT_FOUND")


async def create_airplane(db: AsyncSession, data: AirplaneCreate) -> Airplane:
    if await repo.airplanes.exists(db, registration=data.registration):
        raise ConflictError(
            f"Airplane with registration {data.registration} already exists",
            code="REGISTRATION_EXISTS",
        )

    values = data.model_dump()
    values["min_price"] = _money(data.min_price)
    airplane = await repo.airplanes.create(db, **values)
    await db.commit()
    logger.info("airplane_created", airplane_id=airplane.airplane_id, registration=airplane.registration)
    return airplane


async def update_airplane(db: AsyncSession, airplane_id: int, data: AirplaneUpdate) -> Airplane:
    airplane = await get_airplane(db, airplane_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    registration = changes.get("registration")
    if registration and registration != airplane.registration:
        if await repo.airplanes.exists(db, registration=registration):
            raise ConflictError(
                f"Airplane with registration {registration} already exists",
                code="REGISTRATION_EXISTS",
            )
    if "min_price" in changes:
        changes["min_price"] = _money(changes["min_price"])

    await repo.airplanes.update(db, airplane, **changes)
    await db.commit()
    logger.info("airplane_updated", airplane_id=airplane_id, fields=sorted(changes))
    return airplane


async def delete_airplane(db: AsyncSession, airplane_id: int) -> None:
    airplane = await get_airplane(db, airplane_id)

    if await repo.flights.exists(db, airplane_id=airplane_id):
        raise ConflictError("Cannot delete airplane with scheduled flights", code="AIRPLANE_HAS_FLIGHTS")
    if await repo.seats.exists(db, airplane_id=airplane_id):
        raise ConflictError("Cannot delete airplane with configured seats", code="AIRPLANE_HAS_SEATS")

    await repo.airplanes.delete(db, airplane)
    await db.commit()
    logger.info("airplane_deleted", airplane_id=airplane_id)


async def get_airplane_seats(db: AsyncSession, airplane_id: int) -> tuple[list[Seat], dict[str, dict[str, float]]]:
    """Seats of an airplane in cabin order, plus min/max/avg price per class."""
    await get_airplane(db, airplane_id)
    seats = await repo.seats.find_all(db, airplane_id=airplane_id)

    def cabin_order(seat: Seat):
        seat_class = normalize_seat_class(seat.seat_class)
        return (SEAT_CLASS_ORDER.get(seat_class, 99), seat.seat_no)

    seats.sort(key=cabin_order)

    prices: dict[str, list[float]] = {}
    for seat in seats:
        seat_class = normalize_seat_class(seat.seat_class)
        label = seat_class.value if seat_class else seat.seat_class
        prices.setdefault(label, []).append(float(seat.price))

    pricing = {
        label: {
            "min": min(values),
            "max": max(values),
            "average": round(sum(values) / len(values), 2),
            "count": len(values),
        }
        for label, values in prices.items()
    }
    return seats, pricing


async def create_seat(db: AsyncSession, airplane_id: int, data: SeatCreate) -> Seat:
    await get_airplane(db, airplane_id)

    if await repo.seats.exists(db, airplane_id=airplane_id, seat_no=data.seat_no):
        raise ConflictError(f"Seat {data.seat_no} already exists on this airplane", code="SEAT_EXISTS")

    seat = await repo.seats.create(
        db,
        airplane_id=airplane_id,
        seat_no=data.seat_no,
        seat_class=data.seat_class,
        price=_money(data.price),
    )
    await db.commit()
    logger.info("seat_created", seat_id=seat.seat_id, airplane_id=airplane_id, seat_no=seat.seat_no)
    return seat


async def get_seat(db: AsyncSession, seat_id: int) -> Seat:
    return await repo.seats.get_or_404(db, seat_id, code="SEAT_NOT_FOUND")


async def update_seat(db: AsyncSession, seat_id: int, data: SeatUpdate) -> Seat:
    seat = await get_seat(db, seat_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    seat_no = changes.get("seat_no")
    if seat_no and seat_no != seat.seat_no:
        if await repo.seats.exists(db, airplane_id=seat.airplane_id, seat_no=seat_no):
            raise ConflictError(f"Seat {seat_no} already exists on this airplane", code="SEAT_EXISTS")
    if "price" in changes:
        changes["price"] = _money(changes["price"])

    await repo.seats.update(db, seat, **changes)
    await db.commit()
    logger.info("seat_updated", seat_id=seat_id, fields=sorted(changes))
    return seat


async def delete_seat(db: AsyncSession, seat_id: int) -> None:
    seat = await get_seat(db, seat_id)

    if await repo.passengers.exists(db, seat_id=seat_id):
        raise ConflictError("Cannot delete seat with existing bookings", code="SEAT_HAS_BOOKINGS")

    await repo.seats.delete(db, seat)
    await db.commit()
    logger.info("seat_deleted", seat_id=seat_id)
