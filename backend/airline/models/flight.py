"""
Flight model.

Key design decisions:
- Index on depart_when for the date-bounded search query
- Composite index on (depart_airport_id, arrive_airport_id) for route search
- Arrival after departure and distinct airports enforced at the DB level
"""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String

from airline.db.base import Base, TimestampMixin
from airline.models.enums import FlightStatus, sql_in


class Flight(Base, TimestampMixin):
    __tablename__ = "flights"

    flight_id = Column(Integer, primary_key=True, index=True)
    flight_no = Column(String(10), nullable=False)
    depart_when = Column(DateTime(timezone=True), nullable=False)
    arrive_when = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(20), nullable=False, default=FlightStatus.SCHEDULED.value)
    airplane_id = Column(Integer, ForeignKey("airplanes.airplane_id"), nullable=False, index=True)
    depart_airport_id = Column(Integer, ForeignKey("airports.airport_id"), nullable=False)
    arrive_airport_id = Column(Integer, ForeignKey("airports.airport_id"), nullable=False)

    __table_args__ = (
        CheckConstraint("arrive_when > depart_when", name="check_flight_arrival_after_departure"),
        CheckConstraint("depart_airport_id <> arrive_airport_id", name="check_flight_distinct_airports"),
        CheckConstraint(f"status IN ({sql_in(FlightStatus)})", name="check_flight_status"),
        Index("ix_flights_depart_when", "depart_when"),
        Index("ix_flights_route", "depart_airport_id", "arrive_airport_id"),
    )

    def __repr__(self) -> str:
        return f"<Flight(id={self.flight_id}, no={self.flight_no}, status={self.status})>"
