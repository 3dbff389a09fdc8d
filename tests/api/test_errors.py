def test_missing_token(client):
    response = client.get("/api/v1/chat/rooms")
    assert response.status_code == 401
    assert response.json() == {
        "error": {"code": "NOT_AUTHENTICATED", "message": "Not authenticated. Provide a Bearer token."}
    }


def test_unknown_token(client):
    response = client.get("/api/v1/chat/rooms", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "SESSION_EXPIRED"


def test_body_validation_uses_envelope(client, make_user, auth_headers):
    master = make_user(role="MASTER")
    response = client.post(
        "/api/v1/tracking/start",
        json={"location": {"latitude": 10, "longitude": 10}},
        headers=auth_headers(master),
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert "Booking ID or Project ID is required" in body["error"]["message"]


def test_not_found_envelope(client, make_user, auth_headers):
    user = make_user()
    response = client.get(
        "/api/v1/chat/rooms/00000000-0000-0000-0000-000000000000", headers=auth_headers(user)
    )
    assert response.status_code == 404
    assert response.json()["error"] == {"code": "NOT_FOUND", "message": "Room not found"}


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/v1/nowhere")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "HTTP_404"


def test_health(client):
    assert client.get("/health").status_code == 200
