"""
Declarative base and shared column mixins.
"""

from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import DeclarativeBase

from airline.core.clock import utcnow


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    # Python-side defaults so values are populated on the instance at flush
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )
