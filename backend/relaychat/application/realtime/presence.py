"""
Presence Registry Port - live mapping of user -> current connection.

Contract:
- At most one connection per user; register() is last-writer-wins
- register() hands back the superseded connection so the caller can close it
- unregister() only removes the entry when the given connection is still the
  registered one, so a stale handle cannot evict its replacement
- Safe under concurrent register/unregister/lookup
- sync_lock(user_id) serializes the durable online/offline writes of one user,
  so the last write always reflects the registry state at that time
Implementation: relaychat/infrastructure/presence/in_memory_presence_registry.py
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Optional

from relaychat.application.realtime.connection import LiveConnection
from relaychat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class PresenceLease:
    generation: int
    superseded: Optional[LiveConnection] = None


class PresenceRegistry(ABC):
    @abstractmethod
    async def register(
        self, user_id: UserId, connection: LiveConnection
    ) -> PresenceLease: ...

    @abstractmethod
    async def unregister(self, user_id: UserId, connection: LiveConnection) -> bool:
        """Remove the entry if `connection` is current. Returns True if removed."""
        ...

    @abstractmethod
    async def get(self, user_id: UserId) -> Optional[LiveConnection]: ...

    @abstractmethod
    async def snapshot(self) -> list[tuple[UserId, LiveConnection]]:
        """Point-in-time copy of every registered (user, connection) pair."""
        ...

    @abstractmethod
    def sync_lock(self, user_id: UserId) -> AbstractAsyncContextManager:
        """Per-user lock held while mirroring presence into storage."""
        ...

    async def is_online(self, user_id: UserId) -> bool:
        return await self.get(user_id) is not None
