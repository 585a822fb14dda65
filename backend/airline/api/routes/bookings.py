"""
Booking endpoints with seat-safe creation.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from airline.api.deps import get_current_user, require_admin
from airline.core.security import CurrentUser
from airline.db.session import get_db
from airline.schemas.booking import (
    BookingCancelled,
    BookingCreate,
    BookingCreated,
    BookingDetail,
    BookingResponse,
    BookingStatusUpdate,
    BookingUpdate,
    RefundSummary,
)
from airline.schemas.common import ApiResponse, Pagination
from airline.services import booking_service

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=ApiResponse[BookingCreated], status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Book seats on a flight for one or more passengers.

    The booking and all passengers are written in one transaction. If any
    seat was taken by a concurrent booking the whole request fails with
    409 and nothing is stored.
    """
    created = await booking_service.book_flight(db, user, data)
    return ApiResponse(message="Booking created successfully", data=created)


@router.get("/", response_model=ApiResponse[list[BookingResponse]])
async def list_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    bookings, total = await booking_service.list_client_bookings(db, user.client_id, page, limit)
    return ApiResponse(
        data=[BookingResponse.model_validate(b) for b in bookings],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{booking_id}", response_model=ApiResponse[BookingDetail])
async def get_booking(
    booking_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await booking_service.get_booking_detail(db, booking_id, user))


@router.put("/{booking_id}", response_model=ApiResponse[BookingResponse])
async def update_booking(
    booking_id: int,
    data: BookingUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_service.update_booking(db, booking_id, user, data)
    return ApiResponse(message="Booking updated successfully", data=BookingResponse.model_validate(booking))


@router.patch("/{booking_id}/status", response_model=ApiResponse[BookingResponse])
async def update_booking_status(
    booking_id: int,
    data: BookingStatusUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_service.update_booking_status(db, booking_id, data)
    return ApiResponse(message="Booking status updated", data=BookingResponse.model_validate(booking))


@router.delete("/{booking_id}", response_model=ApiResponse[BookingCancelled])
async def cancel_booking(
    booking_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a booking, release its seats and refund it if it was paid."""
    booking, refund = await booking_service.cancel_booking(db, booking_id, user)
    return ApiResponse(
        message="Booking cancelled successfully",
        data=BookingCancelled(
            booking_id=booking.booking_id,
            status=booking.status,
            refund=RefundSummary(
                payment_id=refund.payment_id,
                amount=float(-refund.amount),
                currency=refund.currency,
            ) if refund else None,
        ),
    )
