"""
Payment endpoints: pay, refund, history and receipts.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from airline.api.deps import get_current_user
from airline.core.security import CurrentUser
from airline.db.session import get_db
from airline.schemas.common import ApiResponse, Pagination
from airline.schemas.payment import PaymentCreate, PaymentCreated, PaymentResponse, PaymentStatusView, Receipt
from airline.services import payment_service
from airline.services.booking_service import get_owned_booking

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/", response_model=ApiResponse[PaymentCreated], status_code=status.HTTP_201_CREATED)
async def make_payment(
    data: PaymentCreate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Pay the exact booking total; the booking becomes confirmed."""
    payment = await payment_service.process_payment(db, user, data)
    booking = await get_owned_booking(db, payment.booking_id, user)
    receipt = await payment_service.build_receipt(db, payment, booking)
    return ApiResponse(
        message="Payment processed successfully",
        data=PaymentCreated(payment_id=payment.payment_id, receipt=receipt),
    )


@router.post("/refund/{booking_id}", response_model=ApiResponse[PaymentResponse])
async def refund(
    booking_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    refund_row = await payment_service.refund_booking(db, user, booking_id)
    return ApiResponse(message="Refund processed successfully", data=PaymentResponse.model_validate(refund_row))


@router.get("/history", response_model=ApiResponse[list[PaymentResponse]])
async def payment_history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    payments, total = await payment_service.payment_history(db, user.client_id, page, limit)
    return ApiResponse(
        data=[PaymentResponse.model_validate(p) for p in payments],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/booking/{booking_id}", response_model=ApiResponse[PaymentStatusView])
async def booking_payment_status(
    booking_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await payment_service.booking_payment_status(db, user, booking_id))


@router.get("/receipt/{payment_id}", response_model=ApiResponse[Receipt])
async def receipt(
    payment_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await payment_service.get_receipt(db, user, payment_id))
