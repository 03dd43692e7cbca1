"""Realtime delivery: live connections, presence and event fan-out."""

from relaychat.application.realtime.connection import (
    ConnectionState,
    LiveConnection,
    LiveSession,
)
from relaychat.application.realtime.presence import PresenceLease, PresenceRegistry
from relaychat.application.realtime.delivery_router import DeliveryRouter

__all__ = [
    "ConnectionState",
    "LiveConnection",
    "LiveSession",
    "PresenceLease",
    "PresenceRegistry",
    "DeliveryRouter",
]
