"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

booking_attempts = Counter(
    "airline_booking_attempts_total",
    "Total booking attempts",
    ["status"],  # success, conflict, rejected
)

booking_latency = Histogram(
    "airline_booking_latency_seconds",
    "Booking transaction latency",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

payment_events = Counter(
    "airline_payment_events_total",
    "Payments and refunds processed",
    ["kind", "currency"],  # kind: payment, refund
)

login_attempts = Counter(
    "airline_login_attempts_total",
    "Login attempts",
    ["result"],  # success, failure
)

rate_limited_requests = Counter(
    "airline_rate_limited_requests_total",
    "Requests rejected by the rate limiter",
    ["scope"],  # api, auth
)

cache_operations = Counter(
    "airline_cache_operations_total",
    "Cache operations",
    ["operation", "result"],
)


def metrics_endpoint() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def record_booking_attempt(status: str):
    """Status: success, conflict, rejected"""
    booking_attempts.labels(status=status).inc()


def record_payment(kind: str, currency: str):
    payment_events.labels(kind=kind, currency=currency).inc()


def record_login(success: bool):
    login_attempts.labels(result="success" if success else "failure").inc()


def record_rate_limited(scope: str):
    rate_limited_requests.labels(scope=scope).inc()


def record_cache_operation(operation: str, hit: bool):
    cache_operations.labels(operation=operation, result="hit" if hit else "miss").inc()
