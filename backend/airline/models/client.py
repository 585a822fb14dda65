"""
Client (customer account) model.

Key design decisions:
- username and email are unique at the DB level; the service checks first
  so it can report which one collided
- card_no is Fernet ciphertext; card_last4 is kept separately for display
- role drives admin gating; is_active lets admins disable an account
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Date, Integer, LargeBinary, String

from airline.db.base import Base, TimestampMixin
from airline.models.enums import PaymentType, Role, sql_in


class Client(Base, TimestampMixin):
    __tablename__ = "clients"

    client_id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone_no = Column(String(20), nullable=False)
    firstname = Column(String(50), nullable=False)
    lastname = Column(String(50), nullable=False)
    dob = Column(Date, nullable=True)
    street = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    province = Column(String(100), nullable=False)
    country = Column(String(100), nullable=False)
    postalcode = Column(String(10), nullable=False)
    card_no = Column(LargeBinary, nullable=True)
    card_last4 = Column(String(4), nullable=True)
    four_digit = Column(String(4), nullable=True)
    payment_type = Column(String(20), nullable=True)
    role = Column(String(10), nullable=False, default=Role.USER.value)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(f"role IN ({sql_in(Role)})", name="check_client_role"),
        CheckConstraint(f"payment_type IS NULL OR payment_type IN ({sql_in(PaymentType)})", name="check_client_payment_type"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def __repr__(self) -> str:
        return f"<Client(id={self.client_id}, username={self.username}, role={self.role})>"
