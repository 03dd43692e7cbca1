import uuid

import pytest

from relaychat.application.commands.conversations import (
    StartConversationCommand,
    StartConversationHandler,
)
from relaychat.application.commands.messages import (
    SendMessageCommand,
    SendMessageHandler,
)
from relaychat.application.queries.messages import (
    ListMessagesHandler,
    ListMessagesQuery,
)
from relaychat.domain.exceptions import (
    AccessDeniedError,
    DomainValidationError,
    EntityNotFoundError,
)
from relaychat.domain.value_objects.conversation_id import ConversationId


# ==================== HTTP ====================


@pytest.fixture()
def conversation_id(client, alice, bob):
    res = client.post(
        "/conversations/start",
        json={"userId": bob["user"]["id"]},
        headers=alice["headers"],
    )
    return res.json()["id"]


def send(client, who, conversation_id, content):
    return client.post(
        "/messages",
        json={"conversationId": conversation_id, "content": content},
        headers=who["headers"],
    )


def test_send_message_returns_message_with_sender_and_conversation(
    client, alice, conversation_id
):
    res = send(client, alice, conversation_id, "hi")
    assert res.status_code == 201
    body = res.json()
    assert body["content"] == "hi"
    assert body["conversationId"] == conversation_id
    assert body["isRead"] is False
    assert body["sender"] == {
        "id": alice["user"]["id"],
        "username": "alice",
        "isOnline": False,
        "lastSeen": None,
    }
    assert body["conversation"]["id"] == conversation_id
    assert body["conversation"]["lastMessageAt"] == body["createdAt"]


def test_history_is_ordered_and_matches_last_message_time(
    client, alice, bob, conversation_id
):
    sent = []
    for i in range(5):
        who = alice if i % 2 == 0 else bob
        sent.append(send(client, who, conversation_id, f"message {i}").json())

    res = client.get(f"/conversations/{conversation_id}/messages", headers=bob["headers"])
    assert res.status_code == 200
    history = res.json()
    assert [m["content"] for m in history] == [f"message {i}" for i in range(5)]
    assert [m["sender"]["username"] for m in history] == [
        "alice",
        "bob",
        "alice",
        "bob",
        "alice",
    ]

    conversations = client.get("/conversations", headers=alice["headers"]).json()
    assert conversations[0]["lastMessageAt"] == sent[-1]["createdAt"]


def test_send_rejects_empty_content_and_stores_nothing(client, alice, conversation_id):
    for content in ("", "   "):
        res = send(client, alice, conversation_id, content)
        assert res.status_code == 422

    history = client.get(
        f"/conversations/{conversation_id}/messages", headers=alice["headers"]
    ).json()
    assert history == []


def test_non_participant_cannot_send_or_read(
    client, register_user, alice, conversation_id
):
    carol = register_user("carol")

    assert send(client, carol, conversation_id, "hi").status_code == 403
    res = client.get(f"/conversations/{conversation_id}/messages", headers=carol["headers"])
    assert res.status_code == 403

    history = client.get(
        f"/conversations/{conversation_id}/messages", headers=alice["headers"]
    ).json()
    assert history == []
    [conversation] = client.get("/conversations", headers=alice["headers"]).json()
    assert conversation["lastMessageAt"] is None


def test_unknown_or_malformed_conversation(client, alice):
    assert send(client, alice, str(uuid.uuid4()), "hi").status_code == 404
    assert send(client, alice, "nope", "hi").status_code == 400
    res = client.get(f"/conversations/{uuid.uuid4()}/messages", headers=alice["headers"])
    assert res.status_code == 404


# ==================== HANDLERS ====================


@pytest.fixture()
def send_handler(conversation_repo, message_repo, user_repo):
    return SendMessageHandler(conversation_repo, message_repo, user_repo, max_length=20)


@pytest.mark.asyncio
async def test_send_validation_order(
    conversation_repo, message_repo, user_repo, make_user, send_handler
):
    alice = await make_user("alice")
    bob = await make_user("bob")
    carol = await make_user("carol")
    conversation = await StartConversationHandler(conversation_repo, user_repo).execute(
        StartConversationCommand(user_id=alice.id, other_user_id=bob.id)
    )

    with pytest.raises(EntityNotFoundError):
        await send_handler.execute(
            SendMessageCommand(
                conversation_id=ConversationId(str(uuid.uuid4())),
                sender_id=alice.id,
                content="hi",
            )
        )
    # Forbidden wins over empty content
    with pytest.raises(AccessDeniedError):
        await send_handler.execute(
            SendMessageCommand(
                conversation_id=conversation.id, sender_id=carol.id, content=""
            )
        )
    with pytest.raises(DomainValidationError):
        await send_handler.execute(
            SendMessageCommand(
                conversation_id=conversation.id, sender_id=alice.id, content="x" * 21
            )
        )

    assert await message_repo.get_by_conversation(conversation.id) == []
    stored = await conversation_repo.get_by_id(conversation.id)
    assert stored.last_message_at is None


@pytest.mark.asyncio
async def test_messages_with_equal_timestamps_keep_insertion_order(
    db,
    conversation_repo, message_repo, user_repo, make_user, send_handler
):
    alice = await make_user("alice")
    bob = await make_user("bob")
    conversation = await StartConversationHandler(conversation_repo, user_repo).execute(
        StartConversationCommand(user_id=alice.id, other_user_id=bob.id)
    )
    first = await send_handler.execute(
        SendMessageCommand(conversation_id=conversation.id, sender_id=alice.id, content="a")
    )
    second = await send_handler.execute(
        SendMessageCommand(conversation_id=conversation.id, sender_id=bob.id, content="b")
    )
    # Force a timestamp tie; sequence decides
    db.messages[conversation.id.value][1].created_at = (
        first.message.created_at
    )

    result = await ListMessagesHandler(conversation_repo, message_repo).execute(
        ListMessagesQuery(conversation_id=conversation.id, user_id=alice.id)
    )
    assert [m.content for m in result.messages] == ["a", "b"]
    assert second.message.sequence > first.message.sequence
    assert result.sender_of(result.messages[1]).username == "bob"
