"""
In-memory PresenceRegistry (single process).

Last-writer-wins per user, guarded by an asyncio lock. Each register() bumps a
registry-wide generation counter so stale connections are identifiable.

Multi-instance deployments need a shared presence store instead (e.g. Redis
pub/sub fan-out); this registry only sees connections of its own process.
"""

import asyncio
import logging
from typing import Optional

from relaychat.application.realtime.connection import LiveConnection
from relaychat.application.realtime.presence import PresenceLease, PresenceRegistry
from relaychat.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


class InMemoryPresenceRegistry(PresenceRegistry):
    def __init__(self):
        self._lock = asyncio.Lock()
        self._entries: dict[UserId, tuple[int, LiveConnection]] = {}
        self._generation = 0
        self._sync_locks: dict[UserId, asyncio.Lock] = {}

    async def register(
        self, user_id: UserId, connection: LiveConnection
    ) -> PresenceLease:
        async with self._lock:
            self._generation += 1
            previous = self._entries.get(user_id)
            self._entries[user_id] = (self._generation, connection)
            superseded = previous[1] if previous else None
            if superseded is not None:
                logger.info(
                    f"[Presence] {user_id.value}: {superseded.connection_id} "
                    f"superseded by {connection.connection_id}"
                )
            return PresenceLease(generation=self._generation, superseded=superseded)

    async def unregister(self, user_id: UserId, connection: LiveConnection) -> bool:
        async with self._lock:
            entry = self._entries.get(user_id)
            if entry is None or entry[1] is not connection:
                return False
            del self._entries[user_id]
            return True

    def sync_lock(self, user_id: UserId) -> asyncio.Lock:
        # One lock per user seen; kept for the process lifetime
        lock = self._sync_locks.get(user_id)
        if lock is None:
            lock = self._sync_locks[user_id] = asyncio.Lock()
        return lock

    async def get(self, user_id: UserId) -> Optional[LiveConnection]:
        entry = self._entries.get(user_id)
        return entry[1] if entry else None

    async def snapshot(self) -> list[tuple[UserId, LiveConnection]]:
        return [(user_id, entry[1]) for user_id, entry in list(self._entries.items())]
