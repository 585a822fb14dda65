"""
Booking model representing a client's reservation on one flight.

Key design decisions:
- Status field allows cancellation without deleting records
- booking_no is a short human-facing reference, unique across bookings
- support / fasttrack are stored as 'yes' / 'no'
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String

from airline.db.base import Base, TimestampMixin
from airline.models.enums import BookingStatus, sql_in


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    booking_id = Column(Integer, primary_key=True, index=True)
    booking_no = Column(String(12), unique=True, index=True, nullable=False)
    support = Column(String(3), nullable=False, default="no")
    fasttrack = Column(String(3), nullable=False, default="no")
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    client_id = Column(Integer, ForeignKey("clients.client_id"), nullable=False, index=True)
    flight_id = Column(Integer, ForeignKey("flights.flight_id"), nullable=False, index=True)

    __table_args__ = (
        CheckConstraint(f"status IN ({sql_in(BookingStatus)})", name="check_booking_status"),
        CheckConstraint("support IN ('yes', 'no')", name="check_booking_support"),
        CheckConstraint("fasttrack IN ('yes', 'no')", name="check_booking_fasttrack"),
    )

    @property
    def is_active(self) -> bool:
        return self.status != BookingStatus.CANCELLED.value

    def __repr__(self) -> str:
        return f"<Booking(id={self.booking_id}, client={self.client_id}, flight={self.flight_id}, status={self.status})>"
