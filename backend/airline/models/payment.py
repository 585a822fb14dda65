"""
Payment ledger.

A refund is a new row with a negative amount and status 'refunded'; the
original completed row is left as it was.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String

from airline.core.clock import utcnow
from airline.db.base import Base
from airline.models.enums import PaymentStatus, sql_in


class Payment(Base):
    __tablename__ = "payments"

    payment_id = Column(Integer, primary_key=True, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    payment_method = Column(String(20), nullable=True)
    payment_timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    booking_id = Column(Integer, ForeignKey("bookings.booking_id"), nullable=False, index=True)

    __table_args__ = (
        CheckConstraint(f"status IN ({sql_in(PaymentStatus)})", name="check_payment_status"),
    )

    def __repr__(self) -> str:
        return f"<Payment(id={self.payment_id}, booking={self.booking_id}, amount={self.amount}, status={self.status})>"
