"""
Payment ledger queries and the refund row.

Payments are append-only: a refund is a second row for the same booking
with a negative amount and status 'refunded'.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from airline import repositories as repo
from airline.core.clock import utcnow
from airline.models import Payment
from airline.models.enums import PaymentStatus


async def latest_payment(db: AsyncSession, booking_id: int) -> Optional[Payment]:
    result = await db.execute(
        select(Payment)
        .where(Payment.booking_id == booking_id)
        .order_by(Payment.payment_timestamp.desc(), Payment.payment_id.desc())
        .limit(1)
    )
    return result.scalars().first()


async def completed_payment(db: AsyncSession, booking_id: int) -> Optional[Payment]:
    return await repo.payments.find_one(db, booking_id=booking_id, status=PaymentStatus.COMPLETED.value)


async def add_refund(db: AsyncSession, paid: Payment) -> Payment:
    """Append a refund mirroring `paid`. The caller owns the transaction."""
    return await repo.payments.create(
        db,
        booking_id=paid.booking_id,
        amount=-paid.amount,
        currency=paid.currency,
        payment_method=paid.payment_method,
        payment_timestamp=utcnow(),
        status=PaymentStatus.REFUNDED.value,
    )
