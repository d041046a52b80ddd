"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_transitions = Counter(
    'booking_transitions_total',
    'Booking status transitions by caller role and action',
    ['role', 'action', 'result']  # result: applied, invalid, no_seats
)

booking_requests = Counter(
    'booking_requests_total',
    'Bookings created or reopened',
    ['kind']  # request, invitation
)

# Seat accounting metrics
seat_operations = Counter(
    'seat_operations_total',
    'Seat counter updates',
    ['operation', 'result']  # reserve/release, ok/rejected/error
)

# Best-effort side effects
notifications = Counter(
    'booking_notifications_total',
    'Booking notification messages',
    ['result']  # sent, failed
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

rate_limit_rejections = Counter(
    'rate_limit_rejections_total',
    'Requests rejected by the rate limiter',
    ['scope']
)

reviews_created = Counter(
    'reviews_created_total',
    'Trip reviews left',
    ['reviewer_role']
)

request_latency = Histogram(
    'http_request_duration_seconds',
    'HTTP request latency',
    ['method', 'status_code'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_transition(role: str, action: str, result: str):
    booking_transitions.labels(role=role, action=action, result=result).inc()


def record_seat_operation(operation: str, result: str):
    """Operation: reserve, release. Result: ok, rejected, error"""
    seat_operations.labels(operation=operation, result=result).inc()


def record_notification(sent: bool):
    notifications.labels(result="sent" if sent else "failed").inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
