"""
Checked baggage tracked by a public tracking number.
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String

from airline.db.base import Base, TimestampMixin
from airline.models.enums import BaggageStatus, sql_in


class Baggage(Base, TimestampMixin):
    __tablename__ = "baggage"

    baggage_id = Column(Integer, primary_key=True, index=True)
    tracking_no = Column(String(20), unique=True, index=True, nullable=False)
    status = Column(String(20), nullable=False, default=BaggageStatus.CHECKED_IN.value, index=True)
    weight = Column(Numeric(5, 2), nullable=True)
    passenger_id = Column(Integer, ForeignKey("passengers.passenger_id"), nullable=False, index=True)

    __table_args__ = (
        CheckConstraint(f"status IN ({sql_in(BaggageStatus)})", name="check_baggage_status"),
    )

    def __repr__(self) -> str:
        return f"<Baggage(id={self.baggage_id}, tracking={self.tracking_no}, status={self.status})>"
