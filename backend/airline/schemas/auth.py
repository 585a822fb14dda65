"""
Pydantic schemas for client registration, login and profile.
"""

import re
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from airline.models.enums import PaymentType

NAME_PATTERN = r"^[A-Za-z\s]+$"
PHONE_PATTERN = r"^\+?[\d\s\-()]+$"
POSTAL_PATTERN = r"^[A-Za-z0-9\s\-]+$"


def _check_password_strength(value: str) -> str:
    if not (re.search(r"[a-z]", value) and re.search(r"[A-Z]", value) and re.search(r"\d", value)):
        raise ValueError("Password must contain at least one lowercase letter, one uppercase letter, and one number")
    return value


class ClientRegister(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_]+$")
    password: str = Field(..., min_length=8, max_length=128)
    email: EmailStr
    phone_no: str = Field(..., min_length=10, max_length=20, pattern=PHONE_PATTERN)
    firstname: str = Field(..., min_length=1, max_length=50, pattern=NAME_PATTERN)
    lastname: str = Field(..., min_length=1, max_length=50, pattern=NAME_PATTERN)
    dob: Optional[date] = None
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    province: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)
    postalcode: str = Field(..., min_length=3, max_length=10, pattern=POSTAL_PATTERN)
    card_no: Optional[str] = Field(None, pattern=r"^\d{12,19}$")
    four_digit: Optional[str] = Field(None, pattern=r"^\d{4}$")
    payment_type: Optional[PaymentType] = None

    check_password_strength = field_validator("password")(_check_password_strength)


class ClientLogin(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8, max_length=128)

    check_password_strength = field_validator("new_password")(_check_password_strength)


class ProfileUpdate(BaseModel):
    email: Optional[EmailStr] = None
    phone_no: Optional[str] = Field(None, min_length=10, max_length=20, pattern=PHONE_PATTERN)
    firstname: Optional[str] = Field(None, min_length=1, max_length=50, pattern=NAME_PATTERN)
    lastname: Optional[str] = Field(None, min_length=1, max_length=50, pattern=NAME_PATTERN)
    dob: Optional[date] = None
    street: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    province: Optional[str] = Field(None, min_length=1, max_length=100)
    country: Optional[str] = Field(None, min_length=1, max_length=100)
    postalcode: Optional[str] = Field(None, min_length=3, max_length=10, pattern=POSTAL_PATTERN)


class ClientResponse(BaseModel):
    client_id: int
    username: str
    email: str
    phone_no: str
    firstname: str
    lastname: str
    dob: Optional[date]
    street: str
    city: str
    province: str
    country: str
    postalcode: str
    card_last4: Optional[str]
    payment_type: Optional[str]
    role: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ClientAdminUpdate(BaseModel):
    role: Optional[str] = Field(None, pattern=r"^(user|admin)$")
    is_active: Optional[bool] = None


class Tokens(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthResult(BaseModel):
    client: ClientResponse
    tokens: Tokens
    is_admin: bool = False
