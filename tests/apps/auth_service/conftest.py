"""Fixtures for auth service route tests.

The app is built with explicit settings and an in-memory Redis so the real
lifespan (connect, wire components, disconnect) runs under TestClient.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any
from urllib.parse import parse_qs, urlsplit

import fakeredis
import pytest
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis
from fastapi import FastAPI
from fastapi.testclient import TestClient

from apps.auth_service.main import create_app
from config.settings import Settings
from libs.auth_session.redis_client import RedisConfig, RedisConnection

SHARED_PASSWORD = "correct horse battery staple"


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "environment": "test",
        "idp_base_url": "https://login.example.com",
        "idp_tenant_id": "tenant-1",
        "idp_client_id": "client-123",
        "idp_client_secret": "secret-xyz",
        "idp_redirect_uri": "http://testserver/auth/callback",
        "session_signing_secret": "test-signing-secret-0123456789abcdef",
        "session_cookie_password": "test-cookie-password-0123456789abcdef",
        "shared_password": SHARED_PASSWORD,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture()
def fake_server() -> FakeServer:
    return FakeServer()


@pytest.fixture()
def redis_client(fake_server: FakeServer) -> FakeRedis:
    return FakeRedis(server=fake_server, decode_responses=True)


@pytest.fixture()
def redis_view(fake_server: FakeServer) -> fakeredis.FakeRedis:
    """Synchronous client on the same server, for assertions outside the app loop."""
    return fakeredis.FakeRedis(server=fake_server, decode_responses=True)


@pytest.fixture()
def app_factory(redis_client: FakeRedis) -> Callable[..., FastAPI]:
    def factory(**overrides: Any) -> FastAPI:
        connection = RedisConnection(RedisConfig(), client=redis_client)
        return create_app(settings=make_settings(**overrides), redis_connection=connection)

    return factory


@pytest.fixture()
def client(app_factory: Callable[..., FastAPI]) -> Iterator[TestClient]:
    with TestClient(app_factory()) as test_client:
        yield test_client


@pytest.fixture()
def password_client(app_factory: Callable[..., FastAPI]) -> Iterator[TestClient]:
    with TestClient(app_factory(auth_mode="password")) as test_client:
        yield test_client


@pytest.fixture()
def start_login() -> Callable[[TestClient], dict[str, str]]:
    """GET /login and return the authorization URL query parameters."""

    def start(client: TestClient) -> dict[str, str]:
        response = client.get("/login", follow_redirects=False)
        assert response.status_code == 302
        query = parse_qs(urlsplit(response.headers["location"]).query)
        return {name: values[0] for name, values in query.items()}

    return start
