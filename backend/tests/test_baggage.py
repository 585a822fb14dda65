"""
Tests for baggage check-in, public tracking and admin handling.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient

from airline.services.baggage_service import generate_tracking_no
from tests.conftest import passenger_payload


@pytest_asyncio.fixture
async def passenger_id(client: AsyncClient, auth_headers, flight, seats) -> int:
    response = await client.post(
        "/api/v1/bookings/",
        json={"flight_id": flight.flight_id, "passengers": [passenger_payload(seats[1].seat_id)]},
        headers=auth_headers,
    )
    return response.json()["data"]["passengers"][0]["passenger_id"]


async def _check_in(client: AsyncClient, admin_headers: dict, passenger_id: int, **extra) -> dict:
    response = await client.post(
        "/api/v1/baggage/", json={"passenger_id": passenger_id, "weight": 18.5, **extra}, headers=admin_headers
    )
    assert response.status_code == 201
    return response.json()["data"]


def test_tracking_number_format():
    number = generate_tracking_no()
    assert number.startswith("BG")
    assert len(number) == 13
    assert number[2:].isdigit()


@pytest.mark.asyncio
async def test_check_in_and_public_tracking(client: AsyncClient, admin_headers, passenger_id):
    bag = await _check_in(client, admin_headers, passenger_id)
    assert bag["status"] == "checked_in"
    assert bag["weight"] == 18.5
    assert bag["passenger_name"] == "Somchai Jaidee"
    assert bag["flight_no"] == "TG640"

    tracked = await client.get(f"/api/v1/baggage/track/{bag['tracking_no'].lower()}")
    assert tracked.status_code == 200
    data = tracked.json()["data"]
    assert data["depart_iata"] == "BKK"
    assert data["arrive_iata"] == "NRT"


@pytest.mark.asyncio
async def test_track_unknown_number(client: AsyncClient):
    response = await client.get("/api/v1/baggage/track/BG00000000000")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "BAGGAGE_NOT_FOUND"


@pytest.mark.asyncio
async def test_check_in_requires_admin(client: AsyncClient, auth_headers, passenger_id):
    response = await client.post("/api/v1/baggage/", json={"passenger_id": passenger_id}, headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_check_in_unknown_passenger(client: AsyncClient, admin_headers):
    response = await client.post("/api/v1/baggage/", json={"passenger_id": 999}, headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "PASSENGER_NOT_FOUND"


@pytest.mark.asyncio
async def test_status_updates_and_lost_report(client: AsyncClient, admin_headers, passenger_id):
    first = await _check_in(client, admin_headers, passenger_id)
    second = await _check_in(client, admin_headers, passenger_id)

    moved = await client.put(
        f"/api/v1/baggage/{first['baggage_id']}/status", json={"status": "in_transit"}, headers=admin_headers
    )
    assert moved.json()["data"]["status"] == "in_transit"

    lost = await client.put(
        f"/api/v1/baggage/track/{second['tracking_no']}/status", json={"status": "lost"}, headers=admin_headers
    )
    assert lost.status_code == 200

    report = await client.get("/api/v1/baggage/reports/lost", headers=admin_headers)
    assert [b["tracking_no"] for b in report.json()["data"]] == [second["tracking_no"]]

    by_status = await client.get("/api/v1/baggage/status/in_transit", headers=admin_headers)
    assert [b["baggage_id"] for b in by_status.json()["data"]] == [first["baggage_id"]]

    stats = await client.get("/api/v1/baggage/stats", headers=admin_headers)
    assert stats.json()["data"] == {
        "checked_in": 0,
        "in_transit": 1,
        "arrived": 0,
        "delivered": 0,
        "lost": 1,
        "total": 2,
    }


@pytest.mark.asyncio
async def test_status_rejects_unknown_value(client: AsyncClient, admin_headers, passenger_id):
    bag = await _check_in(client, admin_headers, passenger_id)
    response = await client.put(
        f"/api/v1/baggage/{bag['baggage_id']}/status", json={"status": "stolen"}, headers=admin_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_search_and_flight_listing(client: AsyncClient, admin_headers, passenger_id, flight):
    bag = await _check_in(client, admin_headers, passenger_id)

    by_name = await client.get("/api/v1/baggage/search", params={"passenger_name": "jaid"}, headers=admin_headers)
    assert [b["baggage_id"] for b in by_name.json()["data"]] == [bag["baggage_id"]]

    by_flight = await client.get("/api/v1/baggage/search", params={"flight_no": "tg999"}, headers=admin_headers)
    assert by_flight.json()["data"] == []

    listing = await client.get(f"/api/v1/baggage/flight/{flight.flight_id}", headers=admin_headers)
    assert len(listing.json()["data"]) == 1


@pytest.mark.asyncio
async def test_owner_access(client: AsyncClient, admin_headers, auth_headers, other_headers, passenger_id):
    bag = await _check_in(client, admin_headers, passenger_id)

    own = await client.get(f"/api/v1/baggage/{bag['baggage_id']}", headers=auth_headers)
    assert own.status_code == 200

    mine = await client.get(f"/api/v1/baggage/passenger/{passenger_id}", headers=auth_headers)
    assert len(mine.json()["data"]) == 1

    foreign = await client.get(f"/api/v1/baggage/{bag['baggage_id']}", headers=other_headers)
    assert foreign.status_code == 403


@pytest.mark.asyncio
async def test_checked_baggage_blocks_passenger_removal(client: AsyncClient, admin_headers, auth_headers, flight, seats, passenger_id):
    booking = await client.get("/api/v1/bookings/", headers=auth_headers)
    booking_id = booking.json()["data"][0]["booking_id"]
    await client.post(
        f"/api/v1/passengers/booking/{booking_id}", json=passenger_payload(seats[2].seat_id), headers=auth_headers
    )
    await _check_in(client, admin_headers, passenger_id)

    response = await client.delete(f"/api/v1/passengers/{passenger_id}", headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "PASSENGER_HAS_BAGGAGE"


@pytest.mark.asyncio
async def test_delete_baggage(client: AsyncClient, admin_headers, passenger_id):
    bag = await _check_in(client, admin_headers, passenger_id)
    response = await client.delete(f"/api/v1/baggage/{bag['baggage_id']}", headers=admin_headers)
    assert response.status_code == 200

    response = await client.get(f"/api/v1/baggage/track/{bag['tracking_no']}")
    assert response.status_code == 404
