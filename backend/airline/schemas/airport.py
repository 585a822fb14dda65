"""
Pydantic schemas for airports.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class AirportCreate(BaseModel):
    city_name: str = Field(..., min_length=1, max_length=100)
    airport_name: str = Field(..., min_length=1, max_length=255)
    iata_code: str = Field(..., pattern=r"^[A-Za-z]{3}$")
    country_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("iata_code")
    @classmethod
    def upper_iata(cls, value: str) -> str:
        return value.upper()


class AirportUpdate(BaseModel):
    city_name: Optional[str] = Field(None, min_length=1, max_length=100)
    airport_name: Optional[str] = Field(None, min_length=1, max_length=255)
    iata_code: Optional[str] = Field(None, pattern=r"^[A-Za-z]{3}$")
    country_name: Optional[str] = Field(None, min_length=1, max_length=100)

    @field_validator("iata_code")
    @classmethod
    def upper_iata(cls, value: Optional[str]) -> Optional[str]:
        return value.upper() if value else value


class AirportResponse(BaseModel):
    airport_id: int
    city_name: str
    airport_name: str
    iata_code: str
    country_name: str

    model_config = {"from_attributes": True}
