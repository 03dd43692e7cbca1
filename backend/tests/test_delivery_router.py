import asyncio

import pytest
import pytest_asyncio

from relaychat.application.commands.conversations import (
    StartConversationCommand,
    StartConversationHandler,
)
from relaychat.application.commands.messages import SendMessageHandler
from relaychat.application.realtime import ConnectionState, DeliveryRouter
from relaychat.application.realtime import events
from relaychat.infrastructure.persistence.memory import InMemoryUserRepository
from relaychat.infrastructure.presence import InMemoryPresenceRegistry
from relaychat.infrastructure.security import JwtTokenService

pytestmark = [pytest.mark.asyncio]


@pytest.fixture()
def token_service():
    return JwtTokenService(secret="test", issuer="relaychat", audience="tests")


@pytest.fixture()
def presence():
    return InMemoryPresenceRegistry()


@pytest.fixture()
def make_router(presence, token_service, user_repo, conversation_repo, message_repo):
    def _make(send_timeout: float = 1.0) -> DeliveryRouter:
        return DeliveryRouter(
            presence=presence,
            token_service=token_service,
            user_repo=user_repo,
            conv_repo=conversation_repo,
            send_message_handler=SendMessageHandler(
                conversation_repo, message_repo, user_repo, max_length=4000
            ),
            send_timeout=send_timeout,
        )

    return _make


@pytest_asyncio.fixture
async def chat(make_user, conversation_repo, user_repo):
    """Alice and Bob with a conversation between them."""
    alice = await make_user("alice")
    bob = await make_user("bob")
    conversation = await StartConversationHandler(conversation_repo, user_repo).execute(
        StartConversationCommand(user_id=alice.id, other_user_id=bob.id)
    )
    return alice, bob, conversation


async def connect(router, token_service, user, connection):
    return await router.connect(connection, token_service.issue(user.id))


# ==================== CONNECT / DISCONNECT ====================


async def test_bad_token_closes_connection(make_router, presence, connection_factory):
    connection = connection_factory()
    session = await make_router().connect(connection, "garbage")

    assert session.state is ConnectionState.DISCONNECTED
    assert connection.closed_with == events.CLOSE_UNAUTHORIZED
    assert await presence.snapshot() == []

    missing = connection_factory("missing")
    await make_router().connect(missing, None)
    assert missing.closed_with == events.CLOSE_UNAUTHORIZED


async def test_connect_marks_online_and_broadcasts(
    make_router, token_service, user_repo, chat, connection_factory
):
    alice, bob, _ = chat
    alice_conn, bob_conn = connection_factory("a"), connection_factory("b")

    session = await connect(make_router(), token_service, alice, alice_conn)
    assert session.state is ConnectionState.AUTHENTICATED
    assert alice_conn.accepted
    assert (await user_repo.get_by_id(alice.id)).is_online

    await connect(make_router(), token_service, bob, bob_conn)
    assert alice_conn.received(events.USER_STATUS) == [
        {"userId": bob.id.value, "status": "online"}
    ]
    # No self-broadcast
    assert bob_conn.received(events.USER_STATUS) == []


async def test_disconnect_marks_offline_and_broadcasts(
    make_router, token_service, user_repo, presence, chat, connection_factory
):
    alice, bob, _ = chat
    alice_conn, bob_conn = connection_factory("a"), connection_factory("b")
    await connect(make_router(), token_service, alice, alice_conn)
    bob_session = await connect(make_router(), token_service, bob, bob_conn)

    await make_router().disconnect(bob_session)

    assert bob_session.state is ConnectionState.DISCONNECTED
    assert not await presence.is_online(bob.id)
    stored = await user_repo.get_by_id(bob.id)
    assert stored.is_online is False
    assert stored.last_seen is not None
    offline = alice_conn.received(events.USER_STATUS)[-1]
    assert offline["status"] == "offline"
    assert offline["userId"] == bob.id.value
    assert offline["lastSeen"] == stored.last_seen.isoformat()


async def test_reconnect_retires_old_connection(
    make_router, token_service, presence, chat, connection_factory
):
    alice, bob, _ = chat
    watcher = connection_factory("bob")
    await connect(make_router(), token_service, bob, watcher)

    old, new = connection_factory("old"), connection_factory("new")
    old_session = await connect(make_router(), token_service, alice, old)
    new_session = await connect(make_router(), token_service, alice, new)

    assert new_session.generation > old_session.generation
    assert old.received(events.SESSION_REPLACED)
    assert old.closed_with == events.CLOSE_SESSION_REPLACED
    assert await presence.get(alice.id) is new

    # The stale handle going away must not take Alice offline
    await make_router().disconnect(old_session)
    assert await presence.get(alice.id) is new
    assert all(e["status"] == "online" for e in watcher.received(events.USER_STATUS))


async def test_reconnect_during_slow_disconnect_stays_online(
    presence, token_service, conversation_repo, message_repo, db, make_user,
    connection_factory,
):
    class SlowOfflineUserRepository(InMemoryUserRepository):
        async def update_presence(self, user_id, is_online, last_seen):
            if not is_online:
                await asyncio.sleep(0.05)
            await super().update_presence(user_id, is_online, last_seen)

    users = SlowOfflineUserRepository(db)
    alice = await make_user("alice")
    router = DeliveryRouter(
        presence=presence,
        token_service=token_service,
        user_repo=users,
        conv_repo=conversation_repo,
        send_message_handler=SendMessageHandler(
            conversation_repo, message_repo, users, max_length=100
        ),
    )
    bob = await make_user("bob")
    watcher = connection_factory("bob")
    await connect(router, token_service, bob, watcher)
    first = await connect(router, token_service, alice, connection_factory("c1"))

    leaving = asyncio.create_task(router.disconnect(first))
    await asyncio.sleep(0.01)
    await connect(router, token_service, alice, connection_factory("c2"))
    await leaving

    assert await presence.is_online(alice.id)
    assert (await users.get_by_id(alice.id)).is_online is True
    last_status = [
        s for s in watcher.received(events.USER_STATUS) if s["userId"] == alice.id.value
    ][-1]
    assert last_status["status"] == "online"


# ==================== MESSAGES ====================


async def test_send_message_pushes_to_recipient_and_echoes(
    make_router, token_service, message_repo, chat, connection_factory
):
    alice, bob, conversation = chat
    alice_conn, bob_conn = connection_factory("a"), connection_factory("b")
    alice_session = await connect(make_router(), token_service, alice, alice_conn)
    await connect(make_router(), token_service, bob, bob_conn)

    await make_router().send_message(alice_session, conversation.id.value, "hi")

    [delivered] = bob_conn.received(events.NEW_MESSAGE)
    [echo] = alice_conn.received(events.NEW_MESSAGE)
    assert delivered == echo
    assert delivered["content"] == "hi"
    assert delivered["conversationId"] == conversation.id.value
    assert delivered["sender"] == {"id": alice.id.value, "username": "alice"}
    stored = await message_repo.get_by_conversation(conversation.id)
    assert delivered["id"] == stored[0].id.value


async def test_offline_recipient_gets_no_push_but_message_is_stored(
    make_router, token_service, message_repo, chat, connection_factory
):
    alice, bob, conversation = chat
    alice_conn, bob_conn = connection_factory("a"), connection_factory("b")
    alice_session = await connect(make_router(), token_service, alice, alice_conn)
    bob_session = await connect(make_router(), token_service, bob, bob_conn)
    await make_router().disconnect(bob_session)

    await make_router().send_message(alice_session, conversation.id.value, "later")

    assert bob_conn.received(events.NEW_MESSAGE) == []
    assert len(alice_conn.received(events.NEW_MESSAGE)) == 1
    stored = await message_repo.get_by_conversation(conversation.id)
    assert [m.content for m in stored] == ["later"]


async def test_rejected_send_reports_error_to_sender_only(
    make_router, token_service, make_user, chat, connection_factory
):
    alice, bob, conversation = chat
    carol = await make_user("carol")
    alice_conn, bob_conn = connection_factory("a"), connection_factory("b")
    carol_conn = connection_factory("c")
    alice_session = await connect(make_router(), token_service, alice, alice_conn)
    await connect(make_router(), token_service, bob, bob_conn)
    carol_session = await connect(make_router(), token_service, carol, carol_conn)

    await make_router().send_message(alice_session, conversation.id.value, "  ")
    await make_router().send_message(carol_session, conversation.id.value, "hi")
    await make_router().send_message(alice_session, "bogus", "hi")

    assert [e["code"] for e in alice_conn.received(events.MESSAGE_ERROR)] == [
        "invalid_argument",
        "invalid_operation",
    ]
    assert carol_conn.received(events.MESSAGE_ERROR)[0] == {
        "conversationId": conversation.id.value,
        "error": "You are not a participant in this conversation.",
        "code": "forbidden",
    }
    assert bob_conn.received(events.NEW_MESSAGE) == []
    assert bob_conn.received(events.MESSAGE_ERROR) == []


async def test_broken_recipient_connection_does_not_block_echo(
    make_router, token_service, chat, connection_factory
):
    alice, bob, conversation = chat
    alice_conn = connection_factory("a")
    broken = connection_factory("b", fail=True)
    alice_session = await connect(make_router(), token_service, alice, alice_conn)
    await connect(make_router(), token_service, bob, broken)

    await make_router().send_message(alice_session, conversation.id.value, "hi")

    assert len(alice_conn.received(events.NEW_MESSAGE)) == 1


async def test_slow_connection_times_out(
    make_router, token_service, chat, connection_factory
):
    alice, bob, conversation = chat

    class StuckConnection(connection_factory):
        async def send(self, event, data):
            if event == events.NEW_MESSAGE:
                await asyncio.sleep(10)
            await super().send(event, data)

    alice_conn = connection_factory("a")
    alice_session = await connect(make_router(), token_service, alice, alice_conn)
    await connect(make_router(), token_service, bob, StuckConnection("b"))

    await asyncio.wait_for(
        make_router(send_timeout=0.05).send_message(
            alice_session, conversation.id.value, "hi"
        ),
        timeout=2,
    )
    assert len(alice_conn.received(events.NEW_MESSAGE)) == 1


# ==================== TYPING ====================


async def test_typing_goes_to_other_participant(
    make_router, token_service, chat, connection_factory
):
    alice, bob, conversation = chat
    alice_conn, bob_conn = connection_factory("a"), connection_factory("b")
    alice_session = await connect(make_router(), token_service, alice, alice_conn)
    await connect(make_router(), token_service, bob, bob_conn)

    await make_router().typing(alice_session, conversation.id.value)

    assert bob_conn.received(events.USER_TYPING) == [
        {"from": alice.id.value, "conversationId": conversation.id.value}
    ]
    assert alice_conn.received(events.USER_TYPING) == []


async def test_typing_for_unknown_conversation_is_dropped(
    make_router, token_service, chat, connection_factory
):
    alice, bob, _ = chat
    alice_conn, bob_conn = connection_factory("a"), connection_factory("b")
    alice_session = await connect(make_router(), token_service, alice, alice_conn)
    await connect(make_router(), token_service, bob, bob_conn)

    await make_router().typing(alice_session, "00000000-0000-0000-0000-000000000000")
    await make_router().typing(alice_session, "not-an-id")

    assert bob_conn.received(events.USER_TYPING) == []
    assert alice_conn.received(events.MESSAGE_ERROR) == []
