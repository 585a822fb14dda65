"""
Payment processing and refunds.

Each operation is one transaction:
  - pay:    insert a completed payment, set the booking to confirmed
  - refund: insert a negative refunded payment, set the booking to
            cancelled and release its seats
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from airline import repositories as repo
from airline.core.clock import utcnow
from airline.core.errors import AuthorizationError, BadRequestError, ConflictError, PaymentError
from airline.core.logging import get_logger
from airline.core.metrics import record_payment
from airline.core.security import CurrentUser
from airline.models import Booking, Passenger, Payment
from airline.models.enums import BookingStatus, PaymentStatus
from airline.schemas.booking import BookingResponse
from airline.schemas.payment import PaymentCreate, PaymentResponse, PaymentStatusView, Receipt
from airline.services import payment_ledger
from airline.services.booking_service import (
    booking_total_cost,
    can_modify_booking,
    get_owned_booking,
    release_seats,
)
from airline.services.seat_service import get_flight_or_404
from airline.services.views import load_flight_detail, load_passengers

logger = get_logger(__name__)


async def process_payment(db: AsyncSession, user: CurrentUser, data: PaymentCreate) -> Payment:
    booking = await get_owned_booking(db, data.booking_id, user)

    if booking.status != BookingStatus.PENDING.value:
        raise BadRequestError(
            f"Cannot pay for a booking with status '{booking.status}'",
            code="INVALID_BOOKING_STATUS",
        )
    if await payment_ledger.completed_payment(db, booking.booking_id):
        raise ConflictError("Payment already exists for this booking", code="PAYMENT_ALREADY_EXISTS")

    expected = await booking_total_cost(db, booking)
    provided = Decimal(str(data.amount)).quantize(Decimal("0.01"))
    if provided != expected:
        raise PaymentError(
            "Payment amount does not match booking total",
            code="INVALID_PAYMENT_AMOUNT",
            details={"provided": float(provided), "expected": float(expected)},
        )

    try:
        payment = await repo.payments.create(
            db,
            booking_id=booking.booking_id,
            amount=provided,
            currency=data.currency,
            payment_method=data.payment_method,
            payment_timestamp=utcnow(),
            status=PaymentStatus.COMPLETED.value,
        )
        await repo.bookings.update(db, booking, status=BookingStatus.CONFIRMED.value)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    record_payment("payment", data.currency)
    logger.info(
        "payment_processed",
        payment_id=payment.payment_id,
        booking_id=booking.booking_id,
        amount=str(provided),
        currency=data.currency,
    )
    return payment


async def refund_booking(db: AsyncSession, user: CurrentUser, booking_id: int) -> Payment:
    booking = await get_owned_booking(db, booking_id, user)

    if booking.status == BookingStatus.CANCELLED.value:
        raise BadRequestError("Booking is already cancelled", code="ALREADY_CANCELLED")
    if booking.status != BookingStatus.CONFIRMED.value:
        raise BadRequestError("Only confirmed bookings can be refunded", code="INVALID_BOOKING_STATUS")

    paid = await payment_ledger.completed_payment(db, booking_id)
    if paid is None:
        raise BadRequestError("No completed payment found for this booking", code="NO_PAYMENT_FOUND")

    flight = await get_flight_or_404(db, booking.flight_id)
    if not can_modify_booking(booking, flight):
        raise AuthorizationError(
            "Refunds are not allowed within 24 hours of departure",
            code="REFUND_NOT_ALLOWED",
        )

    try:
        refund = await payment_ledger.add_refund(db, paid)
        await release_seats(db, booking_id)
        await repo.bookings.update(db, booking, status=BookingStatus.CANCELLED.value)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    record_payment("refund", refund.currency)
    logger.info(
        "refund_processed",
        refund_id=refund.payment_id,
        booking_id=booking_id,
        amount=str(refund.amount),
    )
    return refund


async def payment_history(db: AsyncSession, client_id: int, page: int, limit: int) -> tuple[list[Payment], int]:
    owned = select(Booking.booking_id).where(Booking.client_id == client_id)
    total = (
        await db.execute(select(func.count()).select_from(Payment).where(Payment.booking_id.in_(owned)))
    ).scalar_one()
    result = await db.execute(
        select(Payment)
        .where(Payment.booking_id.in_(owned))
        .order_by(Payment.payment_timestamp.desc(), Payment.payment_id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def _payments_for(db: AsyncSession, booking_ids: list[int]) -> list[Payment]:
    result = await db.execute(
        select(Payment)
        .where(Payment.booking_id.in_(booking_ids))
        .order_by(Payment.payment_timestamp.desc(), Payment.payment_id.desc())
    )
    return list(result.scalars().all())


async def booking_payment_status(db: AsyncSession, user: CurrentUser, booking_id: int) -> PaymentStatusView:
    booking = await get_owned_booking(db, booking_id, user)
    payments = await _payments_for(db, [booking_id])
    latest = payments[0] if payments else None
    return PaymentStatusView(
        booking_id=booking_id,
        booking_status=booking.status,
        payment_status=latest.status if latest else None,
        total_cost=float(await booking_total_cost(db, booking)),
        amount_paid=float(sum((p.amount for p in payments), Decimal("0"))),
        payments=[PaymentResponse.model_validate(p) for p in payments],
    )


async def build_receipt(db: AsyncSession, payment: Payment, booking: Booking) -> Receipt:
    return Receipt(
        payment=PaymentResponse.model_validate(payment),
        booking=BookingResponse.model_validate(booking),
        flight=await load_flight_detail(db, booking.flight_id),
        passengers=await load_passengers(db, Passenger.booking_id == booking.booking_id),
    )


async def get_receipt(db: AsyncSession, user: CurrentUser, payment_id: int) -> Receipt:
    payment = await repo.payments.get_or_404(db, payment_id, code="PAYMENT_NOT_FOUND")
    booking = await get_owned_booking(db, payment.booking_id, user)
    return await build_receipt(db, payment, booking)


async def list_payments(db: AsyncSession, page: int, limit: int, status: Optional[PaymentStatus] = None) -> tuple[list[Payment], int]:
    conditions = {"status": status.value} if status else {}
    return await repo.payments.paginate(
        db,
        page,
        limit,
        order_by=(Payment.payment_timestamp.desc(), Payment.payment_id.desc()),
        **conditions,
    )
