"""
Seat model.

Seats are airplane-level inventory. Whether a seat is taken on a given
flight is never stored here; it is derived from passenger rows.
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String, UniqueConstraint

from airline.db.base import Base
from airline.models.enums import LEGACY_SEAT_CLASSES, SeatClass

_ALLOWED_CLASSES = ", ".join(f"'{v}'" for v in [c.value for c in SeatClass] + list(LEGACY_SEAT_CLASSES))


class Seat(Base):
    __tablename__ = "seats"

    seat_id = Column(Integer, primary_key=True, index=True)
    seat_no = Column(String(5), nullable=False)
    seat_class = Column(String(20), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    airplane_id = Column(Integer, ForeignKey("airplanes.airplane_id"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("airplane_id", "seat_no", name="uq_seat_airplane_seat_no"),
        CheckConstraint("price > 0", name="check_seat_price_positive"),
        CheckConstraint(f"seat_class IN ({_ALLOWED_CLASSES})", name="check_seat_class"),
    )

    def __repr__(self) -> str:
        return f"<Seat(id={self.seat_id}, seat_no={self.seat_no}, class={self.seat_class})>"
