"""Tests for the authorization code exchange."""

from dataclasses import replace
from urllib.parse import parse_qs

import httpx
import pytest

from libs.auth_session.exceptions import ConfigurationError, TokenExchangeError
from libs.auth_session.token_client import TokenExchangeClient

TOKEN_URL = "https://login.example.com/tenant-1/oauth2/v2.0/token"


@pytest.mark.asyncio()
async def test_exchange_posts_form_and_returns_tokens(idp_config, respx_mock):
    route = respx_mock.post(TOKEN_URL).mock(
        return_value=httpx.Response(200, json={"access_token": "at", "id_token": "it"})
    )
    client = TokenExchangeClient(idp_config)

    tokens = await client.exchange_code_for_tokens("auth-code", "verifier-1")

    assert tokens == {"access_token": "at", "id_token": "it"}
    request = route.calls.last.request
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    form = {key: values[0] for key, values in parse_qs(request.content.decode()).items()}
    assert form == {
        "client_id": "client-123",
        "client_secret": "secret-xyz",
        "code": "auth-code",
        "grant_type": "authorization_code",
        "redirect_uri": "https://app.example.com/auth/callback",
        "code_verifier": "verifier-1",
    }


@pytest.mark.asyncio()
async def test_non_success_status_raises_with_status(idp_config, respx_mock):
    respx_mock.post(TOKEN_URL).mock(
        return_value=httpx.Response(400, json={"error": "invalid_grant"})
    )
    client = TokenExchangeClient(idp_config)

    with pytest.raises(TokenExchangeError) as exc_info:
        await client.exchange_code_for_tokens("auth-code", "verifier-1")

    assert exc_info.value.status_code == 400
    assert str(exc_info.value) == "Token exchange failed with status: 400"
    assert "invalid_grant" in (exc_info.value.body or "")


@pytest.mark.asyncio()
async def test_non_json_body_raises(idp_config, respx_mock):
    respx_mock.post(TOKEN_URL).mock(return_value=httpx.Response(200, text="<html>"))

    with pytest.raises(TokenExchangeError):
        await TokenExchangeClient(idp_config).exchange_code_for_tokens("c", "v")


@pytest.mark.asyncio()
async def test_non_object_json_raises(idp_config, respx_mock):
    respx_mock.post(TOKEN_URL).mock(return_value=httpx.Response(200, json=["a"]))

    with pytest.raises(TokenExchangeError):
        await TokenExchangeClient(idp_config).exchange_code_for_tokens("c", "v")


@pytest.mark.asyncio()
async def test_transport_error_propagates(idp_config, respx_mock):
    respx_mock.post(TOKEN_URL).mock(side_effect=httpx.ConnectTimeout)

    with pytest.raises(httpx.ConnectTimeout):
        await TokenExchangeClient(idp_config).exchange_code_for_tokens("c", "v")


@pytest.mark.asyncio()
async def test_missing_client_secret_raises_before_any_request(idp_config, respx_mock):
    client = TokenExchangeClient(replace(idp_config, client_secret=""))

    with pytest.raises(ConfigurationError) as exc_info:
        await client.exchange_code_for_tokens("c", "v")

    assert exc_info.value.missing_fields == ["client_secret"]
    assert not respx_mock.calls


@pytest.mark.asyncio()
async def test_injected_http_client_is_used(idp_config, respx_mock):
    respx_mock.post(TOKEN_URL).mock(return_value=httpx.Response(200, json={"access_token": "at"}))

    async with httpx.AsyncClient() as http_client:
        client = TokenExchangeClient(idp_config, http_client=http_client)
        assert await client.exchange_code_for_tokens("c", "v") == {"access_token": "at"}
        assert not http_client.is_closed
