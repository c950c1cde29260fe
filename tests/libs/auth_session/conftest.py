"""Shared fixtures for auth_session tests."""

from __future__ import annotations

import pytest
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis

from libs.auth_session.config import IdentityProviderConfig
from libs.auth_session.session_issuer import SessionIssuer
from libs.auth_session.session_store import SessionStore
from libs.auth_session.session_token import SessionTokenCodec
from libs.auth_session.transaction_store import TransactionStore

SIGNING_SECRET = "test-signing-secret-0123456789abcdef"


@pytest.fixture()
def redis_client() -> FakeRedis:
    # Own server per test so keys never leak between tests
    return FakeRedis(server=FakeServer(), decode_responses=True)


@pytest.fixture()
def idp_config() -> IdentityProviderConfig:
    return IdentityProviderConfig(
        base_url="https://login.example.com",
        tenant_id="tenant-1",
        client_id="client-123",
        client_secret="secret-xyz",
        redirect_uri="https://app.example.com/auth/callback",
    )


@pytest.fixture()
def token_codec() -> SessionTokenCodec:
    return SessionTokenCodec(SIGNING_SECRET)


@pytest.fixture()
def transaction_store(redis_client: FakeRedis) -> TransactionStore:
    return TransactionStore(redis_client)


@pytest.fixture()
def session_store(redis_client: FakeRedis) -> SessionStore:
    return SessionStore(redis_client, session_ttl_seconds=14400)


@pytest.fixture()
def session_issuer(session_store: SessionStore, token_codec: SessionTokenCodec) -> SessionIssuer:
    return SessionIssuer(session_store, token_codec)
