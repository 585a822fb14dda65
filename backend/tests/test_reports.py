"""
Tests for admin reports and exports.
"""

import csv
import io

import pytest
from httpx import AsyncClient

from airline.services import report_service
from tests.conftest import passenger_payload


async def _paid_booking(client: AsyncClient, headers: dict, flight_id: int, seat_id: int, support: str = "no") -> int:
    created = await client.post(
        "/api/v1/bookings/",
        json={"flight_id": flight_id, "passengers": [passenger_payload(seat_id)], "support": support},
        headers=headers,
    )
    booking_id = created.json()["data"]["booking"]["booking_id"]
    amount = created.json()["data"]["total_cost"]
    paid = await client.post(
        "/api/v1/payments/", json={"booking_id": booking_id, "amount": amount}, headers=headers
    )
    assert paid.status_code == 201
    return booking_id


@pytest.mark.asyncio
async def test_reports_require_admin(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/reports/metrics", headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_metrics_are_net_of_refunds(client: AsyncClient, admin_headers, auth_headers, flight, seats):
    refunded = await _paid_booking(client, auth_headers, flight.flight_id, seats[1].seat_id, support="yes")
    await _paid_booking(client, auth_headers, flight.flight_id, seats[2].seat_id)
    await client.post(f"/api/v1/payments/refund/{refunded}", headers=auth_headers)

    response = await client.get("/api/v1/reports/metrics", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"] == {
        "total_bookings": 2,
        "active_bookings": 1,
        "total_revenue": 100.0,
        "total_refunds": 150.0,
        "total_clients": 2,
        "total_flights": 1,
        "average_booking_value": 125.0,
    }


@pytest.mark.asyncio
async def test_metrics_on_empty_database(client: AsyncClient, admin_headers):
    data = (await client.get("/api/v1/reports/metrics", headers=admin_headers)).json()["data"]
    assert data["total_revenue"] == 0.0
    assert data["average_booking_value"] == 0.0


@pytest.mark.asyncio
async def test_daily_series(client: AsyncClient, admin_headers, auth_headers, flight, seats):
    await _paid_booking(client, auth_headers, flight.flight_id, seats[1].seat_id)

    bookings = await client.get("/api/v1/reports/bookings-per-day", params={"days": 7}, headers=admin_headers)
    assert [row["count"] for row in bookings.json()["data"]] == [1]

    revenue = await client.get("/api/v1/reports/revenue-per-day", headers=admin_headers)
    assert [row["revenue"] for row in revenue.json()["data"]] == [100.0]

    too_long = await client.get("/api/v1/reports/revenue-per-day", params={"days": 400}, headers=admin_headers)
    assert too_long.status_code == 422


@pytest.mark.asyncio
async def test_flight_and_booking_stats(client: AsyncClient, admin_headers, auth_headers, flight, seats):
    await _paid_booking(client, auth_headers, flight.flight_id, seats[1].seat_id, support="yes")
    await client.post(
        "/api/v1/bookings/",
        json={"flight_id": flight.flight_id, "passengers": [passenger_payload(seats[2].seat_id)], "fasttrack": "yes"},
        headers=auth_headers,
    )

    flights = (await client.get("/api/v1/reports/flight-stats", headers=admin_headers)).json()["data"]
    assert flights == [
        {"flight_id": flight.flight_id, "flight_no": "TG640", "status": "Scheduled", "passengers": 2, "revenue": 150.0}
    ]

    stats = (await client.get("/api/v1/reports/booking-stats", headers=admin_headers)).json()["data"]
    assert stats["by_status"] == {"pending": 1, "confirmed": 1, "cancelled": 0, "completed": 0}
    assert stats["with_support"] == 1
    assert stats["with_fasttrack"] == 1
    assert stats["average_passengers"] == 1.0


@pytest.mark.asyncio
async def test_export_bookings_csv(client: AsyncClient, admin_headers, auth_headers, flight, seats):
    await _paid_booking(client, auth_headers, flight.flight_id, seats[1].seat_id)

    response = await client.get("/api/v1/reports/export/csv", params={"type": "bookings"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="bookings-report-' in response.headers["content-disposition"]

    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert len(rows) == 1
    assert rows[0]["client"] == "testuser"
    assert rows[0]["status"] == "confirmed"


@pytest.mark.asyncio
async def test_export_metrics_csv(client: AsyncClient, admin_headers):
    response = await client.get("/api/v1/reports/export/csv", headers=admin_headers)
    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert {row["metric"] for row in rows} >= {"total_bookings", "total_revenue"}

    unknown = await client.get("/api/v1/reports/export/csv", params={"type": "payments"}, headers=admin_headers)
    assert unknown.status_code == 422


@pytest.mark.asyncio
async def test_export_pdf(client: AsyncClient, admin_headers, auth_headers, flight, seats):
    await _paid_booking(client, auth_headers, flight.flight_id, seats[1].seat_id)

    response = await client.get("/api/v1/reports/export/pdf", headers=admin_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_pdf_is_rendered_in_worker_thread(client: AsyncClient, admin_headers, monkeypatch):
    rendered = []
    run_in_threadpool = report_service.run_in_threadpool

    async def recording_threadpool(func, *args):
        rendered.append(func)
        return await run_in_threadpool(func, *args)

    monkeypatch.setattr(report_service, "run_in_threadpool", recording_threadpool)
    response = await client.get("/api/v1/reports/export/pdf", headers=admin_headers)
    assert response.status_code == 200
    assert rendered == [report_service.render_pdf]
    assert response.content.startswith(b"%PDF")
