"""Presence registry implementations."""

from relaychat.infrastructure.presence.in_memory_presence_registry import (
    InMemoryPresenceRegistry,
)

__all__ = ["InMemoryPresenceRegistry"]
