"""Tests for authorization URL assembly and identity provider config."""

from dataclasses import replace
from urllib.parse import parse_qsl, urlsplit

import pytest

from libs.auth_session.config import IdentityProviderConfig
from libs.auth_session.exceptions import ConfigurationError
from libs.auth_session.url_builder import build_authorization_url


def test_authorization_url_is_exact(idp_config):
    url = build_authorization_url(idp_config, "S", "C")

    assert url == (
        "https://login.example.com/tenant-1/oauth2/v2.0/authorize"
        "?client_id=client-123"
        "&response_type=code"
        "&redirect_uri=https%3A%2F%2Fapp.example.com%2Fauth%2Fcallback"
        "&response_mode=query"
        "&scope=openid+profile+email"
        "&state=S"
        "&code_challenge=C"
        "&code_challenge_method=S256"
    )


def test_parameter_order(idp_config):
    query = urlsplit(build_authorization_url(idp_config, "S", "C")).query
    names = [name for name, _ in parse_qsl(query)]

    assert names == [
        "client_id",
        "response_type",
        "redirect_uri",
        "response_mode",
        "scope",
        "state",
        "code_challenge",
        "code_challenge_method",
    ]


def test_trailing_slash_on_base_url_is_normalized(idp_config):
    config = replace(idp_config, base_url="https://login.example.com/")
    assert build_authorization_url(config, "S", "C").startswith(
        "https://login.example.com/tenant-1/oauth2/v2.0/authorize?"
    )


def test_custom_authorize_path(idp_config):
    config = replace(idp_config, authorize_path="/authorize")
    assert build_authorization_url(config, "S", "C").startswith(
        "https://login.example.com/tenant-1/authorize?"
    )


def test_missing_settings_are_named(idp_config):
    config = replace(idp_config, client_id="", redirect_uri="")

    with pytest.raises(ConfigurationError) as exc_info:
        build_authorization_url(config, "S", "C")

    assert exc_info.value.missing_fields == ["client_id", "redirect_uri"]
    assert "client_id" in str(exc_info.value)
    assert "redirect_uri" in str(exc_info.value)


def test_client_secret_is_not_needed_for_authorization(idp_config):
    config = replace(idp_config, client_secret="")
    assert "client_secret" not in build_authorization_url(config, "S", "C")


def test_token_endpoint():
    config = IdentityProviderConfig(base_url="https://idp.test", tenant_id="common")
    assert config.token_endpoint == "https://idp.test/common/oauth2/v2.0/token"
    assert config.missing(("client_id", "tenant_id")) == ["client_id"]
