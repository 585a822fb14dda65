"""
Airplane reference data. Seats hang off the airplane, not the flight.
"""

from sqlalchemy import CheckConstraint, Column, Integer, Numeric, String

from airline.db.base import Base


class Airplane(Base):
    __tablename__ = "airplanes"

    airplane_id = Column(Integer, primary_key=True, index=True)
    type = Column(String(100), nullable=False)
    registration = Column(String(20), unique=True, index=True, nullable=False)
    reg_country = Column(String(100), nullable=False)
    msn = Column(String(50), nullable=False)
    manufacturing_year = Column(Integer, nullable=False)
    capacity = Column(Integer, nullable=False)
    min_price = Column(Numeric(10, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("capacity > 0 AND capacity <= 1000", name="check_airplane_capacity"),
        CheckConstraint("min_price > 0", name="check_airplane_min_price_positive"),
    )

    def __repr__(self) -> str:
        return f"<Airplane(id={self.airplane_id}, registration={self.registration})>"
