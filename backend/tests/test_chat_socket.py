"""WebSocket endpoint tests through the real app and TestClient."""

import pytest
from starlette.websockets import WebSocketDisconnect


@pytest.fixture()
def conversation_id(client, alice, bob):
    res = client.post(
        "/conversations/start",
        json={"userId": bob["user"]["id"]},
        headers=alice["headers"],
    )
    assert res.status_code == 200, res.text
    return res.json()["id"]


def ws_url(user) -> str:
    return f"/ws?token={user['token']}"


def test_rejects_missing_or_bad_token(client):
    for url in ("/ws", "/ws?token=not-a-jwt"):
        with client.websocket_connect(url) as ws:
            with pytest.raises(WebSocketDisconnect) as exc:
                ws.receive_json()
            assert exc.value.code == 4401


def test_accepts_bearer_header(client, alice, bob):
    with client.websocket_connect("/ws", headers=alice["headers"]) as alice_ws:
        with client.websocket_connect(ws_url(bob)):
            frame = alice_ws.receive_json()
    assert frame == {
        "event": "userStatus",
        "data": {"userId": bob["user"]["id"], "status": "online"},
    }


def test_presence_shows_in_user_search(client, alice, bob):
    with client.websocket_connect(ws_url(bob)):
        res = client.get("/users/search", params={"query": "bob"}, headers=alice["headers"])
        assert res.json()[0]["isOnline"] is True

    res = client.get("/users/search", params={"query": "bob"}, headers=alice["headers"])
    found = res.json()[0]
    assert found["isOnline"] is False
    assert found["lastSeen"] is not None


def test_message_round_trip(client, alice, bob, conversation_id):
    with client.websocket_connect(ws_url(alice)) as alice_ws:
        with client.websocket_connect(ws_url(bob)) as bob_ws:
            assert alice_ws.receive_json()["event"] == "userStatus"

            alice_ws.send_json(
                {
                    "event": "sendMessage",
                    "data": {"conversationId": conversation_id, "content": "hello"},
                }
            )
            delivered = bob_ws.receive_json()
            echo = alice_ws.receive_json()

    assert delivered == echo
    assert delivered["event"] == "newMessage"
    assert delivered["data"]["content"] == "hello"
    assert delivered["data"]["sender"]["id"] == alice["user"]["id"]

    res = client.get(
        f"/conversations/{conversation_id}/messages", headers=bob["headers"]
    )
    assert [m["content"] for m in res.json()] == ["hello"]


def test_http_send_is_pushed_live(client, alice, bob, conversation_id):
    with client.websocket_connect(ws_url(bob)) as bob_ws:
        res = client.post(
            "/messages",
            json={"conversationId": conversation_id, "content": "via http"},
            headers=alice["headers"],
        )
        assert res.status_code == 201
        frame = bob_ws.receive_json()

    assert frame["event"] == "newMessage"
    assert frame["data"]["id"] == res.json()["id"]


def test_typing_and_errors(client, alice, bob, conversation_id):
    with client.websocket_connect(ws_url(alice)) as alice_ws:
        with client.websocket_connect(ws_url(bob)) as bob_ws:
            alice_ws.receive_json()  # bob online

            alice_ws.send_json({"event": "typing", "data": {"conversationId": conversation_id}})
            assert bob_ws.receive_json() == {
                "event": "userTyping",
                "data": {"from": alice["user"]["id"], "conversationId": conversation_id},
            }

            alice_ws.send_text("not json")
            assert alice_ws.receive_json()["data"]["code"] == "invalid_operation"

            alice_ws.send_bytes(b"\x00\x01")
            binary_error = alice_ws.receive_json()
            assert binary_error["event"] == "messageError"
            assert binary_error["data"]["code"] == "invalid_operation"

            # The connection survives and keeps handling frames
            alice_ws.send_json({"event": "shout", "data": {}})
            error = alice_ws.receive_json()
            assert error["event"] == "messageError"
            assert error["data"]["error"] == "Unknown event: shout"

            alice_ws.send_json(
                {
                    "event": "sendMessage",
                    "data": {"conversationId": conversation_id, "content": ""},
                }
            )
            error = alice_ws.receive_json()["data"]
            assert error["code"] == "invalid_argument"
            assert error["conversationId"] == conversation_id


def test_second_connection_replaces_first(client, alice):
    first_cm = client.websocket_connect(ws_url(alice))
    first = first_cm.__enter__()
    with client.websocket_connect(ws_url(alice)):
        assert first.receive_json()["event"] == "sessionReplaced"
        with pytest.raises(WebSocketDisconnect) as exc:
            first.receive_json()
        assert exc.value.code == 4409

        # The retired socket going away leaves the user online
        first_cm.__exit__(None, None, None)
        res = client.get("/users/me", headers=alice["headers"])
        assert res.json()["isOnline"] is True

    res = client.get("/users/me", headers=alice["headers"])
    assert res.json()["isOnline"] is False
