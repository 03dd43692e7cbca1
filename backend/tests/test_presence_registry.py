import asyncio
import uuid

import pytest

from relaychat.domain.value_objects.user_id import UserId
from relaychat.infrastructure.presence import InMemoryPresenceRegistry

pytestmark = [pytest.mark.asyncio]


def new_user_id() -> UserId:
    return UserId(str(uuid.uuid4()))


async def test_register_replaces_previous_connection(connection_factory):
    registry = InMemoryPresenceRegistry()
    user = new_user_id()
    old, new = connection_factory("old"), connection_factory("new")

    first = await registry.register(user, old)
    second = await registry.register(user, new)

    assert first.superseded is None
    assert second.superseded is old
    assert second.generation > first.generation
    assert await registry.get(user) is new
    assert len(await registry.snapshot()) == 1


async def test_stale_unregister_keeps_current_entry(connection_factory):
    registry = InMemoryPresenceRegistry()
    user = new_user_id()
    old, new = connection_factory("old"), connection_factory("new")
    await registry.register(user, old)
    await registry.register(user, new)

    assert await registry.unregister(user, old) is False
    assert await registry.is_online(user)

    assert await registry.unregister(user, new) is True
    assert not await registry.is_online(user)
    assert await registry.get(user) is None


async def test_concurrent_registrations_leave_one_entry_per_user(connection_factory):
    registry = InMemoryPresenceRegistry()
    users = [new_user_id() for _ in range(3)]
    connections = [connection_factory(f"c{i}") for i in range(30)]

    await asyncio.gather(
        *(
            registry.register(users[i % 3], connection)
            for i, connection in enumerate(connections)
        )
    )

    snapshot = await registry.snapshot()
    assert sorted(u.value for u, _ in snapshot) == sorted(u.value for u in users)
