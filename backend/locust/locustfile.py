"""
Locust Load Test Suite

Point the run at a scheduled flight whose seats are configured:
  export LOAD_FLIGHT_ID=1 LOAD_SEAT_IDS=1,2,3,4,5,6,7,8,9,10
  export LOAD_DEPART_AIRPORT_ID=1 LOAD_ARRIVE_AIRPORT_ID=2 LOAD_DEPART_DATE=2026-12-01

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test double booking
  locust -f locustfile.py --tags throughput   # Test cache and search
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import os
import random
import string

from locust import HttpUser, between, events, tag, task

FLIGHT_ID = int(os.getenv("LOAD_FLIGHT_ID", "1"))
SEAT_IDS = [int(s) for s in os.getenv("LOAD_SEAT_IDS", "1,2,3,4,5,6,7,8,9,10").split(",") if s]
DEPART_AIRPORT_ID = int(os.getenv("LOAD_DEPART_AIRPORT_ID", "1"))
ARRIVE_AIRPORT_ID = int(os.getenv("LOAD_ARRIVE_AIRPORT_ID", "2"))
DEPART_DATE = os.getenv("LOAD_DEPART_DATE", "")
PASSWORD = "LoadTest123"


def random_username():
    return "u_" + "".join(random.choices(string.ascii_lowercase, k=8))


def passenger(seat_id: int) -> dict:
    return {
        "firstname": "Load",
        "lastname": "Tester",
        "passport_no": "LT" + "".join(random.choices(string.digits, k=7)),
        "nationality": "Thai",
        "gender": random.choice(["Male", "Female"]),
        "dob": "1990-01-01",
        "seat_id": seat_id,
    }


def register_and_login(client) -> dict:
    username = random_username()
    client.post("/api/v1/auth/register", json={
        "username": username,
        "password": PASSWORD,
        "email": f"{username}@load.test",
        "phone_no": "+66800000000",
        "firstname": "Load",
        "lastname": "Tester",
        "street": "1 Test Road",
        "city": "Bangkok",
        "province": "Bangkok",
        "country": "Thailand",
        "postalcode": "10110",
    })
    resp = client.post("/api/v1/auth/login", json={"username": username, "password": PASSWORD})
    if resp.status_code != 200:
        return {}
    token = resp.json()["data"]["tokens"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"Target flight {FLIGHT_ID}, contested seats {SEAT_IDS}")
    print("=" * 60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - many users fight over the same few seats

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After the run, verify no seat is held twice:
      SELECT seat_id, COUNT(*) FROM passengers
      WHERE flight_id = X AND holds_seat GROUP BY seat_id HAVING COUNT(*) > 1;
    Should return no rows.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.headers = register_and_login(self.client)

    @tag("concurrency")
    @task
    def book_contested_seat(self):
        if not self.headers:
            return

        with self.client.post(
            "/api/v1/bookings/",
            json={"flight_id": FLIGHT_ID, "passengers": [passenger(random.choice(SEAT_IDS))]},
            headers=self.headers,
            name="/api/v1/bookings/ [contested]",
            catch_response=True,
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409: seat already taken
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - cached airport list and live search

    Run with and without Redis and compare latency:
      locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_airports_cached(self):
        self.client.get("/api/v1/airports/", name="/api/v1/airports/ [cached]")

    @tag("throughput", "read")
    @task(5)
    def search_flights(self):
        if not DEPART_DATE:
            return
        self.client.get(
            "/api/v1/flights/search",
            params={
                "depart_airport_id": DEPART_AIRPORT_ID,
                "arrive_airport_id": ARRIVE_AIRPORT_ID,
                "depart_date": DEPART_DATE,
                "passengers": random.randint(1, 3),
            },
            name="/api/v1/flights/search",
        )

    @tag("throughput", "read")
    @task(3)
    def seat_map(self):
        self.client.get(f"/api/v1/flights/{FLIGHT_ID}/seats", name="/api/v1/flights/{id}/seats")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    The service should answer every request with a proper error code.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = register_and_login(self.client)

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_flight(self):
        with self.client.post(
            "/api/v1/bookings/",
            json={"flight_id": 999999, "passengers": [passenger(SEAT_IDS[0])]},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, (404,))

    @tag("edge")
    @task
    def no_passengers(self):
        with self.client.post(
            "/api/v1/bookings/",
            json={"flight_id": FLIGHT_ID, "passengers": []},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, (400, 422))

    @tag("edge")
    @task
    def same_seat_twice(self):
        seat_id = random.choice(SEAT_IDS)
        with self.client.post(
            "/api/v1/bookings/",
            json={"flight_id": FLIGHT_ID, "passengers": [passenger(seat_id), passenger(seat_id)]},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, (400,))

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post(
            "/api/v1/bookings/",
            data="not json at all",
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, (400, 422))

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post(
            "/api/v1/bookings/",
            json={"flight_id": FLIGHT_ID, "passengers": [passenger(SEAT_IDS[0])]},
            catch_response=True,
        ) as resp:
            self._expect(resp, (401,))

    @tag("edge")
    @task
    def search_without_route(self):
        with self.client.get("/api/v1/flights/search", catch_response=True) as resp:
            self._expect(resp, (400,))


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Mostly browsing, some seat checks, occasional bookings and payments.
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.headers = register_and_login(self.client)
        self.pending = []

    @task(30)
    def browse_airports(self):
        self.client.get("/api/v1/airports/")

    @task(20)
    def view_flight(self):
        self.client.get(f"/api/v1/flights/{FLIGHT_ID}", name="/api/v1/flights/{id}")

    @task(10)
    def check_seats(self):
        self.client.post(
            f"/api/v1/seats/flight/{FLIGHT_ID}/check",
            json={"seat_ids": random.sample(SEAT_IDS, k=min(3, len(SEAT_IDS)))},
            name="/api/v1/seats/flight/{id}/check",
        )

    @task(5)
    def book_seat(self):
        if not self.headers:
            return
        resp = self.client.post(
            "/api/v1/bookings/",
            json={"flight_id": FLIGHT_ID, "passengers": [passenger(random.choice(SEAT_IDS))]},
            headers=self.headers,
        )
        if resp.status_code == 201:
            data = resp.json()["data"]
            self.pending.append((data["booking"]["booking_id"], data["total_cost"]))

    @task(3)
    def pay_booking(self):
        if not self.pending:
            return
        booking_id, amount = self.pending.pop()
        self.client.post(
            "/api/v1/payments/",
            json={"booking_id": booking_id, "amount": amount, "currency": "USD"},
            headers=self.headers,
        )
