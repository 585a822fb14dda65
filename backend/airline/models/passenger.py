"""
Passenger model: one traveller in a booking, holding one seat on one flight.

Key design decisions:
- flight_id is denormalised from the booking so seat occupancy for a
  flight is a single-table lookup
- holds_seat is true while the parent booking is not cancelled. The
  partial unique index on (flight_id, seat_id) WHERE holds_seat makes a
  double-booked seat impossible, even for two concurrent transactions
- passport_no is Fernet ciphertext
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    text,
)

from airline.db.base import Base, TimestampMixin
from airline.models.enums import Gender, sql_in


class Passenger(Base, TimestampMixin):
    __tablename__ = "passengers"

    passenger_id = Column(Integer, primary_key=True, index=True)
    firstname = Column(String(50), nullable=False)
    lastname = Column(String(50), nullable=False)
    passport_no = Column(LargeBinary, nullable=False)
    nationality = Column(String(100), nullable=False)
    phone_no = Column(String(20), nullable=True)
    gender = Column(String(10), nullable=False)
    dob = Column(Date, nullable=False)
    weight_limit = Column(Integer, nullable=False, default=20)
    seat_id = Column(Integer, ForeignKey("seats.seat_id"), nullable=False, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.booking_id"), nullable=False, index=True)
    flight_id = Column(Integer, ForeignKey("flights.flight_id"), nullable=False, index=True)
    holds_seat = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(f"gender IN ({sql_in(Gender)})", name="check_passenger_gender"),
        CheckConstraint("weight_limit >= 0 AND weight_limit <= 50", name="check_passenger_weight_limit"),
        Index(
            "uq_passenger_flight_seat_held",
            "flight_id",
            "seat_id",
            unique=True,
            postgresql_where=text("holds_seat"),
            sqlite_where=text("holds_seat = 1"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Passenger(id={self.passenger_id}, booking={self.booking_id}, seat={self.seat_id})>"
