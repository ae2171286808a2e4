"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking lifecycle
booking_operations = Counter(
    'booking_operations_total',
    'Booking operations handled',
    ['operation', 'status']  # create/update/cancel/payment, success/error
)

credit_charges = Counter(
    'credit_charges_total',
    'Credit charge attempts for bookings paid with credits',
    ['result']  # charged, insufficient
)

# External side effects
calendar_calls = Counter(
    'calendar_calls_total',
    'Calls made to the external calendar',
    ['operation', 'result']  # create/update/delete, success/error
)

email_deliveries = Counter(
    'email_deliveries_total',
    'Email delivery attempts',
    ['kind', 'result']  # create/update/cancel/account_setup, sent/failed
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


def record_booking_operation(operation: str, success: bool):
    """Record a booking operation outcome."""
    booking_operations.labels(operation=operation, status="success" if success else "error").inc()


def record_credit_charge(charged: bool):
    credit_charges.labels(result="charged" if charged else "insufficient").inc()


def record_calendar_call(operation: str, success: bool):
    calendar_calls.labels(operation=operation, result="success" if success else "error").inc()


def record_email_delivery(kind: str, sent: bool):
    email_deliveries.labels(kind=kind, result="sent" if sent else "failed").inc()
