"""
Pytest fixtures for the test database, HTTP client, accounts and a small
flight inventory.

Each test gets a fresh in-memory SQLite database (aiosqlite). StaticPool
keeps one connection alive so every session sees the same tables.
"""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["REDIS_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"

from datetime import date, datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import AsyncGenerator  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from airline.core.security import create_access_token, hash_password  # noqa: E402
from airline.db.base import Base  # noqa: E402
from airline.db.session import Database, get_db  # noqa: E402
from airline.main import create_app  # noqa: E402
from airline.models import Airplane, Airport, Client, Flight, Seat  # noqa: E402
from airline.models.enums import Role  # noqa: E402
from airline.services.auth_service import token_claims  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "Password123"


def passenger_payload(seat_id: int, **overrides) -> dict:
    payload = {
        "firstname": "Somchai",
        "lastname": "Jaidee",
        "passport_no": "AA1234567",
        "nationality": "Thai",
        "gender": "Male",
        "dob": "1990-05-17",
        "seat_id": seat_id,
        "phone_no": "+66812345678",
        "weight_limit": 20,
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture(scope="function")
async def database() -> AsyncGenerator[Database, None]:
    """Create tables on a fresh in-memory database, drop them afterwards."""
    db = Database(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield db

    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await db.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def app(database: Database):
    return create_app(database=database)


@pytest_asyncio.fixture(scope="function")
async def client(app, db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _make_client(db_session: AsyncSession, username: str, email: str, role: str = Role.USER.value) -> Client:
    account = Client(
        username=username,
        password=hash_password(TEST_PASSWORD),
        email=email,
        phone_no="+66812345678",
        firstname="Test",
        lastname="User",
        street="1 Sukhumvit Road",
        city="Bangkok",
        province="Bangkok",
        country="Thailand",
        postalcode="10110",
        role=role,
        is_active=True,
    )
    db_session.add(account)
    await db_session.commit()
    await db_session.refresh(account)
    return account


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> Client:
    return await _make_client(db_session, "testuser", "test@example.com")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> Client:
    return await _make_client(db_session, "otheruser", "other@example.com")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> Client:
    return await _make_client(db_session, "adminuser", "admin@example.com", role=Role.ADMIN.value)


@pytest_asyncio.fixture
async def auth_headers(test_user: Client) -> dict:
    """Authorization headers with a Bearer access token for test_user."""
    return {"Authorization": f"Bearer {create_access_token(token_claims(test_user))}"}


@pytest_asyncio.fixture
async def other_headers(other_user: Client) -> dict:
    return {"Authorization": f"Bearer {create_access_token(token_claims(other_user))}"}


@pytest_asyncio.fixture
async def admin_headers(admin_user: Client) -> dict:
    return {"Authorization": f"Bearer {create_access_token(token_claims(admin_user))}"}


@pytest_asyncio.fixture
async def airports(db_session: AsyncSession) -> tuple[Airport, Airport]:
    bkk = Airport(city_name="Bangkok", airport_name="Suvarnabhumi", iata_code="BKK", country_name="Thailand")
    nrt = Airport(city_name="Tokyo", airport_name="Narita International", iata_code="NRT", country_name="Japan")
    db_session.add_all([bkk, nrt])
    await db_session.commit()
    return bkk, nrt


@pytest_asyncio.fixture
async def airplane(db_session: AsyncSession) -> Airplane:
    plane = Airplane(
        type="Airbus A320",
        registration="HS-ABC",
        reg_country="Thailand",
        msn="1234",
        manufacturing_year=2015,
        capacity=180,
        min_price=Decimal("80.00"),
    )
    db_session.add(plane)
    await db_session.commit()
    return plane


@pytest_asyncio.fixture
async def seats(db_session: AsyncSession, airplane: Airplane) -> list[Seat]:
    """One first-class seat and three economy seats."""
    rows = [
        Seat(seat_no="1A", seat_class="First Class", price=Decimal("500.00"), airplane_id=airplane.airplane_id),
        Seat(seat_no="10A", seat_class="Economy", price=Decimal("100.00"), airplane_id=airplane.airplane_id),
        Seat(seat_no="10B", seat_class="Economy", price=Decimal("100.00"), airplane_id=airplane.airplane_id),
        Seat(seat_no="10C", seat_class="Economy", price=Decimal("120.00"), airplane_id=airplane.airplane_id),
    ]
    db_session.add_all(rows)
    await db_session.commit()
    return rows


def _departure(days: int = 30) -> datetime:
    day = (datetime.now(timezone.utc) + timedelta(days=days)).date()
    return datetime(day.year, day.month, day.day, 10, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def flight(db_session: AsyncSession, airports, airplane: Airplane, seats) -> Flight:
    """A scheduled BKK -> NRT flight departing 30 days from now."""
    bkk, nrt = airports
    depart = _departure(30)
    row = Flight(
        flight_no="TG640",
        depart_when=depart,
        arrive_when=depart + timedelta(hours=6, minutes=5),
        status="Scheduled",
        airplane_id=airplane.airplane_id,
        depart_airport_id=bkk.airport_id,
        arrive_airport_id=nrt.airport_id,
    )
    db_session.add(row)
    await db_session.commit()
    return row


@pytest_asyncio.fixture
async def imminent_flight(db_session: AsyncSession, airports, airplane: Airplane, seats) -> Flight:
    """A scheduled flight departing in 12 hours, inside the modification window."""
    bkk, nrt = airports
    depart = datetime.now(timezone.utc) + timedelta(hours=12)
    row = Flight(
        flight_no="TG642",
        depart_when=depart,
        arrive_when=depart + timedelta(hours=6),
        status="Scheduled",
        airplane_id=airplane.airplane_id,
        depart_airport_id=bkk.airport_id,
        arrive_airport_id=nrt.airport_id,
    )
    db_session.add(row)
    await db_session.commit()
    return row


@pytest_asyncio.fixture
async def flight_date(flight: Flight) -> date:
    return _departure(30).date()
