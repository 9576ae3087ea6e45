"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking attempts',
    ['status']  # success, invalid_request, insufficient_capacity, unavailable
)

booking_latency = Histogram(
    'booking_latency_seconds',
    'Time spent deciding and committing a booking',
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0]
)

seats_assigned = Counter(
    'seats_assigned_total',
    'Seats handed out by successful bookings'
)

seat_resets = Counter(
    'seat_resets_total',
    'Number of full seat map resets'
)

seats_available = Gauge(
    'seats_available',
    'Available seats after the last mutation'
)

# Lock metrics
lock_wait = Histogram(
    'lock_wait_seconds',
    'Time spent waiting for the reservation lock',
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0]
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, invalid_request, insufficient_capacity, unavailable"""
    booking_attempts.labels(status=status).inc()


def record_seats_available(count: int):
    seats_available.set(count)
