"""
Airport reference data.
"""

from sqlalchemy import Column, Integer, String

from airline.db.base import Base


class Airport(Base):
    __tablename__ = "airports"

    airport_id = Column(Integer, primary_key=True, index=True)
    city_name = Column(String(100), nullable=False)
    airport_name = Column(String(255), nullable=False)
    iata_code = Column(String(3), unique=True, index=True, nullable=False)
    country_name = Column(String(100), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Airport(id={self.airport_id}, iata={self.iata_code})>"
