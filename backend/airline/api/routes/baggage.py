"""
Baggage endpoints: public tracking, owner views and admin handling.
Fixed paths are declared before /{baggage_id} so they are matched first.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from airline.api.deps import get_current_user, require_admin
from airline.core.security import CurrentUser
from airline.db.session import get_db
from airline.models.enums import BaggageStatus
from airline.schemas.baggage import BaggageCreate, BaggageStatusUpdate, BaggageTracking
from airline.schemas.common import ApiResponse
from airline.services import baggage_service

router = APIRouter(prefix="/baggage", tags=["Baggage"])


@router.get("/track/{tracking_no}", response_model=ApiResponse[BaggageTracking])
async def track_baggage(tracking_no: str, db: AsyncSession = Depends(get_db)):
    """Public lookup by tracking number."""
    return ApiResponse(data=await baggage_service.track(db, tracking_no))


@router.put("/track/{tracking_no}/status", response_model=ApiResponse[BaggageTracking])
async def update_status_by_tracking(
    tracking_no: str,
    data: BaggageStatusUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    bag = await baggage_service.update_status_by_tracking(db, tracking_no, data)
    return ApiResponse(message="Baggage status updated", data=bag)


@router.get("/passenger/{passenger_id}", response_model=ApiResponse[list[BaggageTracking]])
async def passenger_baggage(
    passenger_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await baggage_service.passenger_baggage(db, passenger_id, user))


@router.get("/search", response_model=ApiResponse[list[BaggageTracking]])
async def search_baggage(
    tracking_no: Optional[str] = Query(None, max_length=20),
    passenger_name: Optional[str] = Query(None, max_length=100),
    flight_no: Optional[str] = Query(None, max_length=10),
    status: Optional[BaggageStatus] = Query(None),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    results = await baggage_service.search_baggage(db, tracking_no, passenger_name, flight_no, status)
    return ApiResponse(message=f"Found {len(results)} items", data=results)


@router.get("/stats", response_model=ApiResponse[dict[str, int]])
async def baggage_stats(admin: CurrentUser = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await baggage_service.baggage_stats(db))


@router.get("/reports/lost", response_model=ApiResponse[list[BaggageTracking]])
async def lost_baggage(admin: CurrentUser = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await baggage_service.baggage_by_status(db, BaggageStatus.LOST))


@router.get("/status/{baggage_status}", response_model=ApiResponse[list[BaggageTracking]])
async def baggage_by_status(
    baggage_status: BaggageStatus,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await baggage_service.baggage_by_status(db, baggage_status))


@router.get("/flight/{flight_id}", response_model=ApiResponse[list[BaggageTracking]])
async def flight_baggage(
    flight_id: int,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await baggage_service.flight_baggage(db, flight_id))


@router.post("/", response_model=ApiResponse[BaggageTracking], status_code=status.HTTP_201_CREATED)
async def create_baggage(
    data: BaggageCreate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    bag = await baggage_service.create_baggage(db, data)
    return ApiResponse(message="Baggage checked in", data=bag)


@router.get("/{baggage_id}", response_model=ApiResponse[BaggageTracking])
async def get_baggage(
    baggage_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await baggage_service.get_baggage(db, baggage_id, user))


@router.put("/{baggage_id}/status", response_model=ApiResponse[BaggageTracking])
async def update_status(
    baggage_id: int,
    data: BaggageStatusUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    bag = await baggage_service.update_status(db, baggage_id, data)
    return ApiResponse(message="Baggage status updated", data=bag)


@router.delete("/{baggage_id}", response_model=ApiResponse[None])
async def delete_baggage(
    baggage_id: int,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await baggage_service.delete_baggage(db, baggage_id)
    return ApiResponse(message="Baggage deleted")
