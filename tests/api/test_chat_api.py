import pytest
from starlette.websockets import WebSocketDisconnect


@pytest.fixture
def pair(client, make_user, auth_headers):
    alice, bob = make_user(first_name="Alice"), make_user(role="MASTER", first_name="Bob")
    return auth_headers(alice), auth_headers(bob), alice, bob


def _room(client, headers, other, expected_status=201):
    response = client.post("/api/v1/chat/rooms", json={"other_user_id": str(other.id)}, headers=headers)
    assert response.status_code == expected_status
    return response.json()


def test_create_room_is_idempotent(client, pair):
    alice_h, bob_h, alice, bob = pair
    first = _room(client, alice_h, bob)
    second = _room(client, bob_h, alice, expected_status=200)
    assert first["id"] == second["id"]
    assert first["other_participants"][0]["first_name"] == "Bob"
    assert second["other_participants"][0]["first_name"] == "Alice"


def test_room_with_self_is_rejected(client, pair):
    alice_h, _, alice, _ = pair
    response = client.post("/api/v1/chat/rooms", json={"other_user_id": str(alice.id)}, headers=alice_h)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_message_flow_updates_unread_counts(client, pair):
    alice_h, bob_h, alice, bob = pair
    room = _room(client, alice_h, bob)

    sent = client.post(
        f"/api/v1/chat/rooms/{room['id']}/messages", json={"content": "Hi Bob"}, headers=alice_h
    )
    assert sent.status_code == 201
    message = sent.json()
    assert message["is_read"] is False

    assert client.get("/api/v1/chat/unread-count", headers=bob_h).json() == {"unread_count": 1}
    assert client.get("/api/v1/chat/unread-count", headers=alice_h).json() == {"unread_count": 0}
    assert client.get(f"/api/v1/chat/rooms/{room['id']}", headers=bob_h).json()["unread_count"] == 1

    read = client.post(f"/api/v1/chat/messages/{message['id']}/read", headers=bob_h)
    assert read.status_code == 200
    assert read.json()["is_read"] is True
    assert read.json()["unread_count"] == 0

    again = client.post(f"/api/v1/chat/messages/{message['id']}/read", headers=bob_h)
    assert again.status_code == 200
    assert again.json()["unread_count"] == 0


def test_room_read_resets_counter(client, pair):
    alice_h, bob_h, alice, bob = pair
    room = _room(client, alice_h, bob)
    for text in ("one", "two", "three"):
        client.post(f"/api/v1/chat/rooms/{room['id']}/messages", json={"content": text}, headers=alice_h)

    response = client.post(f"/api/v1/chat/rooms/{room['id']}/read", headers=bob_h)
    assert response.status_code == 200
    assert response.json()["marked_count"] == 3
    assert response.json()["unread_count"] == 0
    assert client.get("/api/v1/chat/unread-count", headers=bob_h).json()["unread_count"] == 0


def test_listing_messages_marks_room_read(client, pair):
    alice_h, bob_h, alice, bob = pair
    room = _room(client, alice_h, bob)
    client.post(f"/api/v1/chat/rooms/{room['id']}/messages", json={"content": "ping"}, headers=alice_h)

    listing = client.get(f"/api/v1/chat/rooms/{room['id']}/messages", headers=bob_h)
    assert listing.status_code == 200
    assert listing.json()["total"] == 1
    assert client.get("/api/v1/chat/unread-count", headers=bob_h).json()["unread_count"] == 0


def test_outsider_cannot_read_or_post(client, pair, make_user, auth_headers):
    alice_h, _, alice, bob = pair
    room = _room(client, alice_h, bob)
    outsider_h = auth_headers(make_user())

    posted = client.post(
        f"/api/v1/chat/rooms/{room['id']}/messages", json={"content": "hey"}, headers=outsider_h
    )
    assert posted.status_code == 404
    read = client.post(f"/api/v1/chat/rooms/{room['id']}/read", headers=outsider_h)
    assert read.status_code == 403


def test_outsider_cannot_list_messages(client, pair, make_user, auth_headers):
    alice_h, _, alice, bob = pair
    room = _room(client, alice_h, bob)
    outsider_h = auth_headers(make_user())

    listing = client.get(f"/api/v1/chat/rooms/{room['id']}/messages", headers=outsider_h)
    assert listing.status_code == 404
    assert listing.json()["error"] == {"code": "NOT_FOUND", "message": "Room not found"}
    assert client.get(f"/api/v1/chat/rooms/{room['id']}", headers=outsider_h).status_code == 404


def test_text_message_needs_content(client, pair):
    alice_h, _, alice, bob = pair
    room = _room(client, alice_h, bob)
    response = client.post(
        f"/api/v1/chat/rooms/{room['id']}/messages", json={"content": "   "}, headers=alice_h
    )
    assert response.status_code == 400


def test_attachments_need_s3(client, pair):
    alice_h, _, alice, bob = pair
    room = _room(client, alice_h, bob)
    response = client.post(
        f"/api/v1/chat/rooms/{room['id']}/attachments",
        json={"filename": "photo.jpg", "content_type": "image/jpeg"},
        headers=alice_h,
    )
    assert response.status_code == 501
    assert response.json()["error"]["code"] == "NOT_CONFIGURED"


def test_websocket_requires_token(client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/api/v1/chat/ws") as ws:
            ws.receive_text()
    assert exc.value.code == 4001


def test_websocket_reports_bad_requests(client, make_user, auth_headers):
    user = make_user()
    token = auth_headers(user)["Authorization"].split(" ", 1)[1]
    with client.websocket_connect(f"/api/v1/chat/ws?token={token}") as ws:
        ws.send_text("not json")
        assert ws.receive_json()["code"] == "INVALID_JSON"
        ws.send_json({"action": "subscribe"})
        assert ws.receive_json()["code"] == "MISSING_ROOM_ID"
        ws.send_json({"action": "read", "message_id": "nope"})
        assert ws.receive_json()["code"] == "INVALID_MESSAGE_ID"
