"""
Tests for passenger maintenance on existing bookings.
"""

import pytest
from httpx import AsyncClient

from airline.services import passenger_service
from tests.conftest import passenger_payload


async def _booking(client: AsyncClient, headers: dict, flight_id: int, seat_ids: list[int]) -> dict:
    response = await client.post(
        "/api/v1/bookings/",
        json={"flight_id": flight_id, "passengers": [passenger_payload(s) for s in seat_ids]},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()["data"]


@pytest.mark.asyncio
async def test_list_and_get_passengers(client: AsyncClient, auth_headers, other_headers, flight, seats):
    data = await _booking(client, auth_headers, flight.flight_id, [seats[1].seat_id, seats[2].seat_id])
    booking_id = data["booking"]["booking_id"]

    listing = await client.get(f"/api/v1/passengers/booking/{booking_id}", headers=auth_headers)
    assert listing.status_code == 200
    assert [p["seat_no"] for p in listing.json()["data"]] == ["10A", "10B"]

    passenger_id = data["passengers"][0]["passenger_id"]
    one = await client.get(f"/api/v1/passengers/{passenger_id}", headers=auth_headers)
    assert one.json()["data"]["seat_class"] == "Economy"

    foreign = await client.get(f"/api/v1/passengers/{passenger_id}", headers=other_headers)
    assert foreign.status_code == 403


@pytest.mark.asyncio
async def test_update_passenger_details(client: AsyncClient, auth_headers, flight, seats):
    data = await _booking(client, auth_headers, flight.flight_id, [seats[1].seat_id])
    passenger_id = data["passengers"][0]["passenger_id"]

    response = await client.put(
        f"/api/v1/passengers/{passenger_id}",
        json={"firstname": "Somsak", "passport_no": "BB7654321"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    passenger = response.json()["data"]
    assert passenger["firstname"] == "Somsak"
    assert passenger["passport_no"] == "*****4321"


@pytest.mark.asyncio
async def test_update_near_departure_is_blocked(client: AsyncClient, auth_headers, imminent_flight, seats):
    data = await _booking(client, auth_headers, imminent_flight.flight_id, [seats[1].seat_id])
    passenger_id = data["passengers"][0]["passenger_id"]

    response = await client.put(
        f"/api/v1/passengers/{passenger_id}", json={"firstname": "Late"}, headers=auth_headers
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "MODIFICATION_NOT_ALLOWED"


@pytest.mark.asyncio
async def test_change_seat(client: AsyncClient, auth_headers, other_headers, flight, seats):
    mine = await _booking(client, auth_headers, flight.flight_id, [seats[1].seat_id])
    await _booking(client, other_headers, flight.flight_id, [seats[2].seat_id])
    passenger_id = mine["passengers"][0]["passenger_id"]

    taken = await client.patch(
        f"/api/v1/passengers/{passenger_id}/seat", json={"seat_id": seats[2].seat_id}, headers=auth_headers
    )
    assert taken.status_code == 409
    assert taken.json()["error"]["code"] == "SEAT_NOT_AVAILABLE"

    moved = await client.patch(
        f"/api/v1/passengers/{passenger_id}/seat", json={"seat_id": seats[3].seat_id}, headers=auth_headers
    )
    assert moved.status_code == 200
    assert moved.json()["data"]["seat_no"] == "10C"

    # The old seat is free again
    check = await client.post(
        f"/api/v1/seats/flight/{flight.flight_id}/check", json={"seat_ids": [seats[1].seat_id]}
    )
    assert check.json()["data"]["available"] is True


@pytest.mark.asyncio
async def test_change_to_foreign_seat(client: AsyncClient, auth_headers, flight, seats):
    mine = await _booking(client, auth_headers, flight.flight_id, [seats[1].seat_id])
    passenger_id = mine["passengers"][0]["passenger_id"]

    response = await client.patch(
        f"/api/v1/passengers/{passenger_id}/seat", json={"seat_id": 4242}, headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_SEAT"


@pytest.mark.asyncio
async def test_add_and_remove_passenger(client: AsyncClient, auth_headers, flight, seats):
    data = await _booking(client, auth_headers, flight.flight_id, [seats[1].seat_id])
    booking_id = data["booking"]["booking_id"]
    first_id = data["passengers"][0]["passenger_id"]

    last = await client.delete(f"/api/v1/passengers/{first_id}", headers=auth_headers)
    assert last.status_code == 400
    assert last.json()["error"]["code"] == "LAST_PASSENGER"

    added = await client.post(
        f"/api/v1/passengers/booking/{booking_id}",
        json=passenger_payload(seats[2].seat_id, firstname="Malee", gender="Female"),
        headers=auth_headers,
    )
    assert added.status_code == 201
    assert added.json()["data"]["seat_no"] == "10B"

    detail = await client.get(f"/api/v1/bookings/{booking_id}", headers=auth_headers)
    assert detail.json()["data"]["total_cost"] == 200.0

    removed = await client.delete(f"/api/v1/passengers/{first_id}", headers=auth_headers)
    assert removed.status_code == 200
    listing = await client.get(f"/api/v1/passengers/booking/{booking_id}", headers=auth_headers)
    assert [p["firstname"] for p in listing.json()["data"]] == ["Malee"]


@pytest.mark.asyncio
async def test_add_passenger_on_taken_seat(client: AsyncClient, auth_headers, other_headers, flight, seats):
    data = await _booking(client, auth_headers, flight.flight_id, [seats[1].seat_id])
    await _booking(client, other_headers, flight.flight_id, [seats[2].seat_id])

    response = await client.post(
        f"/api/v1/passengers/booking/{data['booking']['booking_id']}",
        json=passenger_payload(seats[2].seat_id),
        headers=auth_headers,
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "SEAT_NOT_AVAILABLE"


@pytest.mark.asyncio
async def test_add_passenger_after_payment(client: AsyncClient, auth_headers, flight, seats):
    data = await _booking(client, auth_headers, flight.flight_id, [seats[1].seat_id])
    booking_id = data["booking"]["booking_id"]
    paid = await client.post(
        "/api/v1/payments/",
        json={"booking_id": booking_id, "amount": 100.0, "currency": "USD"},
        headers=auth_headers,
    )
    assert paid.status_code == 201

    response = await client.post(
        f"/api/v1/passengers/booking/{booking_id}",
        json=passenger_payload(seats[2].seat_id),
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_BOOKING_STATUS"


async def _nothing_held(db, flight_id, seat_ids, exclude_passenger_id=None):
    return []


@pytest.mark.asyncio
async def test_change_seat_rejected_by_held_seat_index(
    client: AsyncClient, auth_headers, other_headers, flight, seats, monkeypatch
):
    """A seat claimed after the availability check is refused and the old seat is kept."""
    # ORM rows expire on rollback, so read ids up front
    flight_id, mine, theirs = flight.flight_id, seats[1].seat_id, seats[2].seat_id
    booking = await _booking(client, auth_headers, flight_id, [mine])
    await _booking(client, other_headers, flight_id, [theirs])
    passenger_id = booking["passengers"][0]["passenger_id"]

    monkeypatch.setattr(passenger_service, "check_seats_availability", _nothing_held)
    response = await client.patch(
        f"/api/v1/passengers/{passenger_id}/seat", json={"seat_id": theirs}, headers=auth_headers
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "SEAT_NOT_AVAILABLE"

    current = await client.get(f"/api/v1/passengers/{passenger_id}", headers=auth_headers)
    assert current.json()["data"]["seat_no"] == "10A"


@pytest.mark.asyncio
async def test_add_passenger_rejected_by_held_seat_index(
    client: AsyncClient, auth_headers, other_headers, flight, seats, monkeypatch
):
    flight_id, mine, theirs = flight.flight_id, seats[1].seat_id, seats[2].seat_id
    booking = await _booking(client, auth_headers, flight_id, [mine])
    await _booking(client, other_headers, flight_id, [theirs])
    booking_id = booking["booking"]["booking_id"]

    monkeypatch.setattr(passenger_service, "check_seats_availability", _nothing_held)
    response = await client.post(
        f"/api/v1/passengers/booking/{booking_id}",
        json=passenger_payload(theirs, firstname="Malee", gender="Female"),
        headers=auth_headers,
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "SEAT_NOT_AVAILABLE"

    listing = await client.get(f"/api/v1/passengers/booking/{booking_id}", headers=auth_headers)
    assert [p["seat_no"] for p in listing.json()["data"]] == ["10A"]
