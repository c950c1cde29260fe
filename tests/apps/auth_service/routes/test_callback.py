"""Tests for the /auth/callback route."""

import httpx
import pytest
from fastapi.testclient import TestClient

from libs.auth_session import messages

TOKEN_URL = "https://login.example.com/tenant-1/oauth2/v2.0/token"


def test_successful_callback_sets_cookie_and_redirects(
    client: TestClient, redis_view, respx_mock, start_login
) -> None:
    route = respx_mock.post(TOKEN_URL).mock(
        return_value=httpx.Response(200, json={"access_token": "at", "id_token": "it"})
    )
    params = start_login(client)

    response = client.get(
        f"/auth/callback?code=auth-code&state={params['state']}", follow_redirects=False
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/"
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("session=")
    assert "HttpOnly" in cookie
    assert "SameSite=lax" in cookie
    assert "Max-Age=14400" in cookie
    assert route.call_count == 1
    assert len(redis_view.keys("session:*")) == 1
    assert redis_view.keys("auth:*") == []

    home = client.get("/", follow_redirects=False)
    assert home.status_code == 200


def test_replayed_callback_is_rejected(client: TestClient, respx_mock, start_login) -> None:
    respx_mock.post(TOKEN_URL).mock(return_value=httpx.Response(200, json={"access_token": "at"}))
    params = start_login(client)
    url = f"/auth/callback?code=auth-code&state={params['state']}"

    assert client.get(url, follow_redirects=False).status_code == 302
    replay = client.get(url, follow_redirects=False)

    assert replay.status_code == 400
    assert messages.AUTHENTICATION_REQUEST_EXPIRED in replay.text


def test_identity_provider_error(client: TestClient) -> None:
    response = client.get(
        "/auth/callback?error=access_denied&error_description=User+cancelled",
        follow_redirects=False,
    )

    assert response.status_code == 400
    assert messages.IDP_ERROR in response.text
    assert "set-cookie" not in response.headers


@pytest.mark.parametrize(
    "query",
    ["", "?code=abc", "?state=abc123", "?code=abc&state=bad%20state", "?code=abc&state=abc123%0A"],
)
def test_malformed_callback(client: TestClient, query: str) -> None:
    response = client.get(f"/auth/callback{query}", follow_redirects=False)

    assert response.status_code == 400
    assert messages.INVALID_AUTHENTICATION_RESPONSE in response.text


def test_unknown_state_is_expired(client: TestClient) -> None:
    response = client.get(
        "/auth/callback?code=abc&state=never-stored-state", follow_redirects=False
    )

    assert response.status_code == 400
    assert messages.AUTHENTICATION_REQUEST_EXPIRED in response.text


def test_token_endpoint_rejection_is_401(
    client: TestClient, redis_view, respx_mock, start_login
) -> None:
    respx_mock.post(TOKEN_URL).mock(return_value=httpx.Response(400, json={"error": "invalid_grant"}))
    params = start_login(client)

    response = client.get(
        f"/auth/callback?code=auth-code&state={params['state']}", follow_redirects=False
    )

    assert response.status_code == 401
    assert messages.AUTHENTICATION_FAILED in response.text
    assert "invalid_grant" not in response.text
    assert redis_view.keys("session:*") == []


def test_error_view_context(client: TestClient) -> None:
    response = client.get("/auth/callback?error=server_error", follow_redirects=False)

    assert messages.ERROR_PAGE_TITLE in response.text
    assert 'href="/login"' in response.text
