"""
Admin reporting endpoints, including CSV and PDF downloads.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from airline.api.deps import require_admin
from airline.core.clock import utcnow
from airline.db.session import get_db
from airline.schemas.common import ApiResponse
from airline.schemas.report import BookingStats, DailyCount, DailyRevenue, FlightReportRow, Metrics
from airline.services import report_service

router = APIRouter(prefix="/reports", tags=["Reports"], dependencies=[Depends(require_admin)])


def _attachment(content, media_type: str, stem: str, extension: str) -> Response:
    filename = f"{stem}-{utcnow():%Y%m%d}.{extension}"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/metrics", response_model=ApiResponse[Metrics])
async def metrics(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await report_service.get_metrics(db))


@router.get("/bookings-per-day", response_model=ApiResponse[list[DailyCount]])
async def bookings_per_day(days: int = Query(30, ge=1, le=365), db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await report_service.bookings_per_day(db, days))


@router.get("/revenue-per-day", response_model=ApiResponse[list[DailyRevenue]])
async def revenue_per_day(days: int = Query(30, ge=1, le=365), db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await report_service.revenue_per_day(db, days))


@router.get("/flight-stats", response_model=ApiResponse[list[FlightReportRow]])
async def flight_stats(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await report_service.flight_report(db))


@router.get("/booking-stats", response_model=ApiResponse[BookingStats])
async def booking_stats(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await report_service.booking_stats(db))


@router.get("/export/csv")
async def export_csv(
    type: Literal["metrics", "bookings"] = Query("metrics"),
    db: AsyncSession = Depends(get_db),
):
    content = await report_service.export_csv(db, type)
    return _attachment(content, "text/csv", f"{type}-report", "csv")


@router.get("/export/pdf")
async def export_pdf(db: AsyncSession = Depends(get_db)):
    content = await report_service.export_pdf(db)
    return _attachment(content, "application/pdf", "airline-report", "pdf")
