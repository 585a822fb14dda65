"""
Tests for public flight search, seat maps and airport listing.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from tests.conftest import passenger_payload


def _search_params(flight, flight_date, **overrides) -> dict:
    params = {
        "depart_airport_id": flight.depart_airport_id,
        "arrive_airport_id": flight.arrive_airport_id,
        "depart_date": flight_date.isoformat(),
    }
    params.update(overrides)
    return params


@pytest.mark.asyncio
async def test_search_finds_flight(client: AsyncClient, flight, flight_date):
    response = await client.get("/api/v1/flights/search", params=_search_params(flight, flight_date))
    assert response.status_code == 200
    results = response.json()["data"]
    assert len(results) == 1
    result = results[0]
    assert result["flight_no"] == "TG640"
    assert result["seat_class"] == "Economy"
    assert result["available_seats"] == 3
    assert result["min_price"] == 100.0
    assert result["duration"] == "6h 5m"
    assert result["depart_airport"]["iata_code"] == "BKK"
    assert result["airplane"]["registration"] == "HS-ABC"


@pytest.mark.asyncio
async def test_search_counts_held_seats(client: AsyncClient, auth_headers, flight, flight_date, seats):
    await client.post(
        "/api/v1/bookings/",
        json={"flight_id": flight.flight_id, "passengers": [passenger_payload(seats[1].seat_id)]},
        headers=auth_headers,
    )
    response = await client.get("/api/v1/flights/search", params=_search_params(flight, flight_date))
    assert response.json()["data"][0]["available_seats"] == 2

    # Not enough economy seats left for three travellers
    response = await client.get(
        "/api/v1/flights/search", params=_search_params(flight, flight_date, passengers=3)
    )
    assert response.json()["data"] == []


@pytest.mark.asyncio
async def test_search_by_class(client: AsyncClient, flight, flight_date):
    response = await client.get(
        "/api/v1/flights/search", params=_search_params(flight, flight_date, seat_class="First Class")
    )
    result = response.json()["data"][0]
    assert result["available_seats"] == 1
    assert result["min_price"] == 500.0


@pytest.mark.asyncio
async def test_search_other_date_is_empty(client: AsyncClient, flight, flight_date):
    other_day = flight_date + timedelta(days=1)
    response = await client.get(
        "/api/v1/flights/search", params=_search_params(flight, flight_date, depart_date=other_day.isoformat())
    )
    assert response.status_code == 200
    assert response.json()["data"] == []


@pytest.mark.asyncio
async def test_search_missing_parameters(client: AsyncClient, flight):
    response = await client.get("/api/v1/flights/search", params={"depart_airport_id": flight.depart_airport_id})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_PARAMETERS"


@pytest.mark.asyncio
async def test_search_same_airports(client: AsyncClient, flight, flight_date):
    response = await client.get(
        "/api/v1/flights/search",
        params=_search_params(flight, flight_date, arrive_airport_id=flight.depart_airport_id),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_ROUTE"


@pytest.mark.asyncio
async def test_search_unknown_airport(client: AsyncClient, flight, flight_date):
    response = await client.get(
        "/api/v1/flights/search", params=_search_params(flight, flight_date, arrive_airport_id=999)
    )
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "AIRPORT_NOT_FOUND"


@pytest.mark.asyncio
async def test_search_passenger_bounds(client: AsyncClient, flight, flight_date):
    response = await client.get(
        "/api/v1/flights/search", params=_search_params(flight, flight_date, passengers=11)
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_flight_detail(client: AsyncClient, flight):
    response = await client.get(f"/api/v1/flights/{flight.flight_id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["arrive_airport"]["iata_code"] == "NRT"

    missing = await client.get("/api/v1/flights/9999")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "FLIGHT_NOT_FOUND"


@pytest.mark.asyncio
async def test_seat_map_groups_by_class(client: AsyncClient, auth_headers, flight, seats):
    await client.post(
        "/api/v1/bookings/",
        json={"flight_id": flight.flight_id, "passengers": [passenger_payload(seats[2].seat_id)]},
        headers=auth_headers,
    )

    response = await client.get(f"/api/v1/flights/{flight.flight_id}/seats")
    assert response.status_code == 200
    data = response.json()["data"]
    assert list(data["seat_map"]) == ["First Class", "Economy"]
    economy = data["seat_map"]["Economy"]
    assert [s["seat_no"] for s in economy["booked"]] == ["10B"]
    assert len(economy["available"]) == 2

    summary = {row["seat_class"]: row for row in data["summary"]}
    assert summary["Economy"] == {
        "seat_class": "Economy",
        "total": 3,
        "available": 2,
        "booked": 1,
        "min_price": 100.0,
        "max_price": 120.0,
    }

    same = await client.get(f"/api/v1/seats/flight/{flight.flight_id}")
    assert same.json()["data"] == data


@pytest.mark.asyncio
async def test_check_seats(client: AsyncClient, auth_headers, flight, seats):
    taken, free = seats[1].seat_id, seats[2].seat_id
    await client.post(
        "/api/v1/bookings/",
        json={"flight_id": flight.flight_id, "passengers": [passenger_payload(taken)]},
        headers=auth_headers,
    )

    response = await client.post(
        f"/api/v1/flights/{flight.flight_id}/seats/check", json={"seat_ids": [free, taken]}
    )
    assert response.status_code == 200
    assert response.json()["data"] == {"available": False, "unavailable_seats": [taken]}

    response = await client.post(f"/api/v1/seats/flight/{flight.flight_id}/check", json={"seat_ids": [free]})
    assert response.json()["data"] == {"available": True, "unavailable_seats": []}


@pytest.mark.asyncio
async def test_check_seats_requires_ids(client: AsyncClient, flight):
    response = await client.post(f"/api/v1/seats/flight/{flight.flight_id}/check", json={"seat_ids": []})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_airports(client: AsyncClient, airports):
    response = await client.get("/api/v1/airports/")
    assert response.status_code == 200
    assert {a["iata_code"] for a in response.json()["data"]} == {"BKK", "NRT"}

    response = await client.get("/api/v1/airports/", params={"country": "japan"})
    assert [a["iata_code"] for a in response.json()["data"]] == ["NRT"]

    response = await client.get("/api/v1/airports/", params={"search": "suvarna"})
    assert [a["iata_code"] for a in response.json()["data"]] == ["BKK"]


@pytest.mark.asyncio
async def test_get_airport(client: AsyncClient, airports):
    bkk, _ = airports
    response = await client.get(f"/api/v1/airports/{bkk.airport_id}")
    assert response.status_code == 200
    assert response.json()["data"]["city_name"] == "Bangkok"

    assert (await client.get("/api/v1/airports/999")).status_code == 404
