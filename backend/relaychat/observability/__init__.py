"""Observability package for the RelayChat backend."""

from relaychat.observability.metrics import (
    set_active_connections,
    observe_request_latency,
    increment_live_event,
    increment_message_sent,
    increment_delivery_failure,
    get_metrics_content,
    MessageChannel,
    DeliveryFailureReason,
)

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
