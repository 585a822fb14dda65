"""
Enumerations shared by models, schemas and services.
Stored as plain strings; CHECK constraints keep the tables honest.
"""

from enum import Enum
from typing import Optional


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class FlightStatus(str, Enum):
    SCHEDULED = "Scheduled"
    DELAYED = "Delayed"
    CANCELLED = "Cancelled"
    BOARDING = "Boarding"
    DEPARTED = "Departed"
    ARRIVED = "Arrived"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class BaggageStatus(str, Enum):
    CHECKED_IN = "checked_in"
    IN_TRANSIT = "in_transit"
    ARRIVED = "arrived"
    DELIVERED = "delivered"
    LOST = "lost"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class PaymentType(str, Enum):
    VISA = "VISA"
    MASTERCARD = "MASTERCARD"
    AMEX = "AMEX"
    DISCOVER = "DISCOVER"
    JCB = "JCB"
    MAESTRO = "MAESTRO"


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class SeatClass(str, Enum):
    FIRST = "First Class"
    BUSINESS = "Business"
    PREMIUM_ECONOMY = "Premium Economy"
    ECONOMY = "Economy"


# Older seat rows use these spellings
LEGACY_SEAT_CLASSES = {
    "FIRSTCLASS": SeatClass.FIRST,
    "PREMIUM_ECONOMY": SeatClass.PREMIUM_ECONOMY,
    "ECONOMY": SeatClass.ECONOMY,
}

SEAT_CLASS_ORDER = {
    SeatClass.FIRST: 1,
    SeatClass.BUSINESS: 2,
    SeatClass.PREMIUM_ECONOMY: 3,
    SeatClass.ECONOMY: 4,
}


def normalize_seat_class(value: str) -> Optional[SeatClass]:
    """Map canonical or legacy spellings to a SeatClass; None if unknown."""
    if value in LEGACY_SEAT_CLASSES:
        return LEGACY_SEAT_CLASSES[value]
    for seat_class in SeatClass:
        if value == seat_class.value or value.lower() == seat_class.value.lower():
            return seat_class
    return None


def seat_class_variants(seat_class: SeatClass) -> list[str]:
    """All stored spellings that mean `seat_class`."""
    return [seat_class.value] + [k for k, v in LEGACY_SEAT_CLASSES.items() if v == seat_class]


def values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


def sql_in(enum_cls) -> str:
    return ", ".join(f"'{v}'" for v in values(enum_cls))
