"""
Airport reference data: public listing (cached) and admin CRUD.
"""

from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from airline import repositories as repo
from airline.core.errors import ConflictError
from airline.core.logging import get_logger
from airline.models import Airport, Flight
from airline.schemas.airport import AirportCreate, AirportUpdate

logger = get_logger(__name__)


async def list_airports(db: AsyncSession, country: Optional[str] = None, search: Optional[str] = None) -> list[Airport]:
    query = select(Airport)
    if country:
        query = query.where(func.lower(Airport.country_name) == country.lower())
    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(
            or_(
                func.lower(Airport.city_name).like(pattern),
                func.lower(Airport.airport_name).like(pattern),
                func.lower(Airport.iata_code).like(pattern),
            )
        )
    result = await db.execute(query.order_by(Airport.country_name, Airport.city_name))
    return list(result.scalars().all())


async def get_airport(db: AsyncSession, airport_id: int) -> Airport:
    return await repo.airports.get_or_404(db, airport_id, code="AIRPORT_NOT_FOUND")


async def create_airport(db: AsyncSession, data: AirportCreate) -> Airport:
    if await repo.airports.exists(db, iata_code=data.iata_code):
        raise ConflictError(f"Airport with IATA code {data.iata_code} already exists", code="IATA_EXISTS")

    airport = await repo.airports.create(db, **data.model_dump())
    await db.commit()
    logger.info("airport_created", airport_id=airport.airport_id, iata=airport.iata_code)
    return airport


async def update_airport(db: AsyncSession, airport_id: int, data: AirportUpdate) -> Airport:
    airport = await get_airport(db, airport_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    new_code = changes.get("iata_code")
    if new_code and new_code != airport.iata_code and await repo.airports.exists(db, iata_code=new_code):
        raise ConflictError(f"Airport with IATA code {new_code} already exists", code="IATA_EXISTS")

    await repo.airports.update(db, airport, **changes)
    await db.commit()
    logger.info("airport_updated", airport_id=airport_id, fields=sorted(changes))
    return airport


async def delete_airport(db: AsyncSession, airport_id: int) -> None:
    airport = await get_airport(db, airport_id)

    in_use = await db.execute(
        select(func.count())
        .select_from(Flight)
        .where(or_(Flight.depart_airport_id == airport_id, Flight.arrive_airport_id == airport_id))
    )
    if in_use.scalar_one():
        raise ConflictError("Cannot delete airport with existing flights", code="AIRPORT_HAS_FLIGHTS")

    await repo.airports.delete(db, airport)
    await db.commit()
    logger.info("airport_deleted", airport_id=airport_id)
