"""
Public airport endpoints with Redis caching on the list operation.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from airline.core.logging import get_logger
from airline.db.session import get_db
from airline.schemas.airport import AirportResponse
from airline.schemas.common import ApiResponse
from airline.services import airport_service
from airline.services.cache_service import get_cached_airports, set_cached_airports

logger = get_logger(__name__)
router = APIRouter(prefix="/airports", tags=["Airports"])


@router.get("/", response_model=ApiResponse[list[AirportResponse]])
async def list_airports(
    country: Optional[str] = Query(None, max_length=100),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    """
    List airports, optionally filtered by country or a city/name/IATA search.
    Results are cached in Redis and invalidated on any admin change.
    """
    cached = await get_cached_airports(country, search)
    if cached is not None:
        logger.info("airports_list_cache_hit", country=country, search=search)
        return ApiResponse(data=[AirportResponse(**item) for item in cached])

    airports = [AirportResponse.model_validate(a) for a in await airport_service.list_airports(db, country, search)]
    await set_cached_airports(country, search, [a.model_dump() for a in airports])
    return ApiResponse(data=airports)


@router.get("/{airport_id}", response_model=ApiResponse[AirportResponse])
async def get_airport(airport_id: int, db: AsyncSession = Depends(get_db)):
    airport = await airport_service.get_airport(db, airport_id)
    return ApiResponse(data=AirportResponse.model_validate(airport))
