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
    ['status']  # success, conflict, blocked, invalid, error
)

booking_latency = Histogram(
    'booking_latency_seconds',
    'Booking request latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

saga_compensations = Counter(
    'saga_compensations_total',
    'Compensating actions executed after a failed saga step',
    ['saga', 'step']
)

payment_recording_failures = Counter(
    'payment_recording_failures_total',
    'Initial payments that could not be stored for a created booking'
)

# Availability metrics
availability_latency = Histogram(
    'availability_query_latency_seconds',
    'Availability resolution latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5]
)

# Resource lock metrics
resource_lock_requests = Counter(
    'resource_lock_requests_total',
    'Per-resource write lock requests',
    ['result']  # acquired, rejected
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)

redis_circuit_breaker_open = Gauge(
    'redis_circuit_breaker_open',
    'Redis circuit breaker state (1=open, 0=closed)'
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, conflict, blocked, invalid, error"""
    booking_attempts.labels(status=status).inc()


def record_compensation(saga: str, step: str):
    saga_compensations.labels(saga=saga, step=step).inc()


def record_lock_request(acquired: bool):
    result = "acquired" if acquired else "rejected"
    resource_lock_requests.labels(result=result).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
