"""Tests for the protected landing page and health check."""

from fastapi.testclient import TestClient

SHARED_PASSWORD = "correct horse battery staple"


def test_anonymous_request_is_redirected_to_login(client: TestClient) -> None:
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/login"


def test_tampered_cookie_is_anonymous(client: TestClient) -> None:
    response = client.get(
        "/", headers={"Cookie": "session=not-a-fernet-token"}, follow_redirects=False
    )

    assert response.status_code == 302


def test_signed_in_user_sees_home(password_client: TestClient) -> None:
    password_client.post("/login", data={"password": SHARED_PASSWORD}, follow_redirects=False)

    response = password_client.get("/", follow_redirects=False)

    assert response.status_code == 200
    assert "You are signed in" in response.text
    assert 'href="/logout"' in response.text


def test_expired_session_is_redirected(password_client: TestClient, redis_view) -> None:
    password_client.post("/login", data={"password": SHARED_PASSWORD}, follow_redirects=False)
    for key in redis_view.keys("session:*"):
        redis_view.delete(key)

    response = password_client.get("/", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/login"


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "auth_service", "redis": "connected"}
