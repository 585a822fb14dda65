"""Initial schema: clients, airports, airplanes, seats, flights, bookings,
passengers, payments and baggage.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "clients",
        sa.Column("client_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone_no", sa.String(20), nullable=False),
        sa.Column("firstname", sa.String(50), nullable=False),
        sa.Column("lastname", sa.String(50), nullable=False),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("street", sa.String(255), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("province", sa.String(100), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("postalcode", sa.String(10), nullable=False),
        sa.Column("card_no", sa.LargeBinary(), nullable=True),
        sa.Column("card_last4", sa.String(4), nullable=True),
        sa.Column("four_digit", sa.String(4), nullable=True),
        sa.Column("payment_type", sa.String(20), nullable=True),
        sa.Column("role", sa.String(10), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint("role IN ('user', 'admin')", name="check_client_role"),
        sa.CheckConstraint(
            "payment_type IS NULL OR payment_type IN "
            "('VISA', 'MASTERCARD', 'AMEX', 'DISCOVER', 'JCB', 'MAESTRO')",
            name="check_client_payment_type",
        ),
    )
    op.create_index("ix_clients_client_id", "clients", ["client_id"])
    op.create_index("ix_clients_username", "clients", ["username"], unique=True)
    op.create_index("ix_clients_email", "clients", ["email"], unique=True)

    op.create_table(
        "airports",
        sa.Column("airport_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("city_name", sa.String(100), nullable=False),
        sa.Column("airport_name", sa.String(255), nullable=False),
        sa.Column("iata_code", sa.String(3), nullable=False),
        sa.Column("country_name", sa.String(100), nullable=False),
    )
    op.create_index("ix_airports_airport_id", "airports", ["airport_id"])
    op.create_index("ix_airports_iata_code", "airports", ["iata_code"], unique=True)
    op.create_index("ix_airports_country_name", "airports", ["country_name"])

    op.create_table(
        "airplanes",
        sa.Column("airplane_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("type", sa.String(100), nullable=False),
        sa.Column("registration", sa.String(20), nullable=False),
        sa.Column("reg_country", sa.String(100), nullable=False),
        sa.Column("msn", sa.String(50), nullable=False),
        sa.Column("manufacturing_year", sa.Integer(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("min_price", sa.Numeric(10, 2), nullable=False),
        sa.CheckConstraint("capacity > 0 AND capacity <= 1000", name="check_airplane_capacity"),
        sa.CheckConstraint("min_price > 0", name="check_airplane_min_price_positive"),
    )
    op.create_index("ix_airplanes_airplane_id", "airplanes", ["airplane_id"])
    op.create_index("ix_airplanes_registration", "airplanes", ["registration"], unique=True)

    op.create_table(
        "seats",
        sa.Column("seat_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("seat_no", sa.String(5), nullable=False),
        sa.Column("seat_class", sa.String(20), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("airplane_id", sa.Integer(), sa.ForeignKey("airplanes.airplane_id"), nullable=False),
        sa.UniqueConstraint("airplane_id", "seat_no", name="uq_seat_airplane_seat_no"),
        sa.CheckConstraint("price > 0", name="check_seat_price_positive"),
        sa.CheckConstraint(
            "seat_class IN ('First Class', 'Business', 'Premium Economy', 'Economy', "
            "'FIRSTCLASS', 'PREMIUM_ECONOMY', 'ECONOMY')",
            name="check_seat_class",
        ),
    )
    op.create_index("ix_seats_seat_id", "seats", ["seat_id"])
    op.create_index("ix_seats_airplane_id", "seats", ["airplane_id"])

    op.create_table(
        "flights",
        sa.Column("flight_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("flight_no", sa.String(10), nullable=False),
        sa.Column("depart_when", sa.DateTime(timezone=True), nullable=False),
        sa.Column("arrive_when", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="Scheduled"),
        sa.Column("airplane_id", sa.Integer(), sa.ForeignKey("airplanes.airplane_id"), nullable=False),
        sa.Column("depart_airport_id", sa.Integer(), sa.ForeignKey("airports.airport_id"), nullable=False),
        sa.Column("arrive_airport_id", sa.Integer(), sa.ForeignKey("airports.airport_id"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("arrive_when > depart_when", name="check_flight_arrival_after_departure"),
        sa.CheckConstraint("depart_airport_id <> arrive_airport_id", name="check_flight_distinct_airports"),
        sa.CheckConstraint(
            "status IN ('Scheduled', 'Delayed', 'Cancelled', 'Boarding', 'Departed', 'Arrived')",
            name="check_flight_status",
        ),
    )
    op.create_index("ix_flights_flight_id", "flights", ["flight_id"])
    op.create_index("ix_flights_airplane_id", "flights", ["airplane_id"])
    # Search filters on departure date and route
    op.create_index("ix_flights_depart_when", "flights", ["depart_when"])
    op.create_index("ix_flights_route", "flights", ["depart_airport_id", "arrive_airport_id"])

    op.create_table(
        "bookings",
        sa.Column("booking_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("booking_no", sa.String(12), nullable=False),
        sa.Column("support", sa.String(3), nullable=False, server_default="no"),
        sa.Column("fasttrack", sa.String(3), nullable=False, server_default="no"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.client_id"), nullable=False),
        sa.Column("flight_id", sa.Integer(), sa.ForeignKey("flights.flight_id"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name="check_booking_status",
        ),
        sa.CheckConstraint("support IN ('yes', 'no')", name="check_booking_support"),
        sa.CheckConstraint("fasttrack IN ('yes', 'no')", name="check_booking_fasttrack"),
    )
    op.create_index("ix_bookings_booking_id", "bookings", ["booking_id"])
    op.create_index("ix_bookings_booking_no", "bookings", ["booking_no"], unique=True)
    op.create_index("ix_bookings_client_id", "bookings", ["client_id"])
    op.create_index("ix_bookings_flight_id", "bookings", ["flight_id"])

    op.create_table(
        "passengers",
        sa.Column("passenger_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("firstname", sa.String(50), nullable=False),
        sa.Column("lastname", sa.String(50), nullable=False),
        sa.Column("passport_no", sa.LargeBinary(), nullable=False),
        sa.Column("nationality", sa.String(100), nullable=False),
        sa.Column("phone_no", sa.String(20), nullable=True),
        sa.Column("gender", sa.String(10), nullable=False),
        sa.Column("dob", sa.Date(), nullable=False),
        sa.Column("weight_limit", sa.Integer(), nullable=False, server_default=sa.text("20")),
        sa.Column("seat_id", sa.Integer(), sa.ForeignKey("seats.seat_id"), nullable=False),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.booking_id"), nullable=False),
        sa.Column("flight_id", sa.Integer(), sa.ForeignKey("flights.flight_id"), nullable=False),
        sa.Column("holds_seat", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint("gender IN ('Male', 'Female', 'Other')", name="check_passenger_gender"),
        sa.CheckConstraint("weight_limit >= 0 AND weight_limit <= 50", name="check_passenger_weight_limit"),
    )
    op.create_index("ix_passengers_passenger_id", "passengers", ["passenger_id"])
    op.create_index("ix_passengers_seat_id", "passengers", ["seat_id"])
    op.create_index("ix_passengers_booking_id", "passengers", ["booking_id"])
    op.create_index("ix_passengers_flight_id", "passengers", ["flight_id"])
    # At most one live holder per seat per flight. Cancelled bookings clear
    # holds_seat, which takes their rows out of the index.
    op.create_index(
        "uq_passenger_flight_seat_held",
        "passengers",
        ["flight_id", "seat_id"],
        unique=True,
        postgresql_where=sa.text("holds_seat"),
    )

    op.create_table(
        "payments",
        sa.Column("payment_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("payment_method", sa.String(20), nullable=True),
        sa.Column("payment_timestamp", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.booking_id"), nullable=False),
        sa.CheckConstraint(
            "status IN ('pending', 'completed', 'failed', 'refunded')",
            name="check_payment_status",
        ),
    )
    op.create_index("ix_payments_payment_id", "payments", ["payment_id"])
    op.create_index("ix_payments_booking_id", "payments", ["booking_id"])
    op.create_index("ix_payments_payment_timestamp", "payments", ["payment_timestamp"])

    op.create_table(
        "baggage",
        sa.Column("baggage_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("tracking_no", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="checked_in"),
        sa.Column("weight", sa.Numeric(5, 2), nullable=True),
        sa.Column("passenger_id", sa.Integer(), sa.ForeignKey("passengers.passenger_id"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('checked_in', 'in_transit', 'arrived', 'delivered', 'lost')",
            name="check_baggage_status",
        ),
    )
    op.create_index("ix_baggage_baggage_id", "baggage", ["baggage_id"])
    op.create_index("ix_baggage_tracking_no", "baggage", ["tracking_no"], unique=True)
    op.create_index("ix_baggage_status", "baggage", ["status"])
    op.create_index("ix_baggage_passenger_id", "baggage", ["passenger_id"])


def downgrade() -> None:
    op.drop_table("baggage")
    op.drop_table("payments")
    op.drop_table("passengers")
    op.drop_table("bookings")
    op.drop_table("flights")
    op.drop_table("seats")
    op.drop_table("airplanes")
    op.drop_table("airports")
    op.drop_table("clients")
