"""Authorization URL assembly for the identity provider redirect."""

from __future__ import annotations

from urllib.parse import urlencode

from libs.auth_session.config import AUTHORIZE_FIELDS, IdentityProviderConfig
from libs.auth_session.pkce import CODE_CHALLENGE_METHOD

RESPONSE_TYPE = "code"
RESPONSE_MODE = "query"


def build_authorization_url(config: IdentityProviderConfig, state: str, code_challenge: str) -> str:
    """Build the identity provider authorization URL.

    Args:
        config: Identity provider configuration
        state: CSRF state parameter
        code_challenge: PKCE S256 challenge

    Returns:
        ``{base}/{tenant}/{authorize_path}?client_id=...&code_challenge_method=S256``

    Raises:
        ConfigurationError: If base URL, tenant, client id, redirect URI or
            authorize path is missing
    """
    config.require(AUTHORIZE_FIELDS)

    # Parameter order is part of the contract
    params = {
        "client_id": config.client_id,
        "response_type": RESPONSE_TYPE,
        "redirect_uri": config.redirect_uri,
        "response_mode": RESPONSE_MODE,
        "scope": config.scope,
        "state": state,
        "code_challenge": code_challenge,
        "code_challenge_method": CODE_CHALLENGE_METHOD,
    }
    return f"{config.authorize_endpoint}?{urlencode(params)}"


__all__ = ["RESPONSE_MODE", "RESPONSE_TYPE", "build_authorization_url"]
