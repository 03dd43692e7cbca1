"""
Prometheus Metrics for the RelayChat backend.

DATA FLOW:
    This file                  presentation/api/metrics.py         Scraper
    ─────────                  ────────────────────────────         ───────
    Define metrics ──────────► /metrics endpoint ──────────────►   Prometheus ──► Grafana

METRIC TYPES:
    - Gauge: Value goes up/down (live connections)
    - Counter: Value only goes up (events, messages, delivery failures)
    - Histogram: Distribution (HTTP latency percentiles)
"""

from prometheus_client import (
    Gauge,
    Histogram,
    Counter,
    generate_latest,
    CONTENT_TYPE_LATEST,
)


# =============================================================================
# METRICS DEFINITIONS
# =============================================================================
ACTIVE_CONNECTIONS = Gauge(
    "relaychat_active_connections", "Number of authenticated live connections"
)

REQUEST_LATENCY = Histogram(
    "http_server_request_duration_seconds",
    "Http request latency in seconds",
    ["method", "route", "http_status_code"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5],
)

LIVE_EVENTS_TOTAL = Counter(
    "relaychat_live_events_total",
    "Total number of live events received from clients",
    ["event"],
)

MESSAGES_SENT_TOTAL = Counter(
    "relaychat_messages_sent_total",
    "Total number of messages stored, by the channel they arrived on",
    ["channel"],
)

DELIVERY_FAILURES_TOTAL = Counter(
    "relaychat_delivery_failures_total",
    "Total number of failed live sends or rejected live messages",
    ["reason"],
)


# =============================================================================
# LABEL CONSTANTS (avoid hardcoding strings throughout codebase)
# =============================================================================
class MessageChannel:
    HTTP = "http"
    LIVE = "live"


class DeliveryFailureReason:
    """Reason labels for relaychat_delivery_failures_total."""

    TRANSPORT_ERROR = "transport_error"
    TIMEOUT = "timeout"
    REJECTED = "rejected"


# =============================================================================
# RECORDING FUNCTIONS
# =============================================================================
def set_active_connections(count: int):
    """Call after presence changes. Integration point: application/realtime/delivery_router.py"""
    ACTIVE_CONNECTIONS.set(count)


def observe_request_latency(method: str, route: str, status_code: int, duration: float):
    """Call to record request latency. Integration point: fastapi_app.py MetricsMiddleware"""
    REQUEST_LATENCY.labels(
        method=method, route=route, http_status_code=str(status_code)
    ).observe(duration)


def increment_live_event(event: str):
    LIVE_EVENTS_TOTAL.labels(event=event).inc()


def increment_message_sent(channel: str):
    MESSAGES_SENT_TOTAL.labels(channel=channel).inc()


def increment_delivery_failure(reason: str):
    """
    Call when a live push fails or a live send is rejected.

    Args:
        reason: transport_error, timeout or rejected
    """
    DELIVERY_FAILURES_TOTAL.labels(reason=reason).inc()


# =============================================================================
# HELPER FOR /metrics ENDPOINT
# =============================================================================
def get_metrics_content():
    """
    Generate Prometheus metrics output.

    Called by: presentation/api/metrics.py

    Returns:
        Tuple of (content_bytes, content_type_string)
    """
    return generate_latest(), CONTENT_TYPE_LATEST


__all__ = [
    "set_active_connections",
    "observe_request_latency",
    "increment_live_event",
    "increment_message_sent",
    "increment_delivery_failure",
    "get_metrics_content",
    "MessageChannel",
    "DeliveryFailureReason",
]
