"""Authorization code to token exchange against the identity provider.

The authorization code is single use at the provider, so the exchange is
never retried. A bounded timeout is always applied.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from libs.auth_session.config import TOKEN_FIELDS, IdentityProviderConfig
from libs.auth_session.exceptions import TokenExchangeError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
GRANT_TYPE = "authorization_code"


class TokenExchangeClient:
    """Exchanges authorization codes for tokens at the provider token endpoint."""

    def __init__(
        self,
        config: IdentityProviderConfig,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize token exchange client.

        Args:
            config: Identity provider configuration
            timeout_seconds: Total request timeout for the token call
            http_client: Optional shared client; a short-lived client is
                created per exchange when omitted
        """
        self.config = config
        self.timeout_seconds = timeout_seconds
        self._http_client = http_client

    async def exchange_code_for_tokens(self, code: str, code_verifier: str) -> dict[str, Any]:
        """Exchange authorization code + PKCE verifier for tokens.

        Args:
            code: Authorization code from the callback
            code_verifier: PKCE code verifier retrieved for the callback state

        Returns:
            Raw token response (access_token, refresh_token, id_token, ...)

        Raises:
            ConfigurationError: If required provider settings are missing
            TokenExchangeError: If the provider answers non-2xx or a non-JSON body
            httpx.RequestError: On transport failures (timeouts, DNS, resets)
        """
        self.config.require(TOKEN_FIELDS)

        form = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "code": code,
            "grant_type": GRANT_TYPE,
            "redirect_uri": self.config.redirect_uri,
            "code_verifier": code_verifier,
        }

        if self._http_client is not None:
            response = await self._post(self._http_client, form)
        else:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await self._post(client, form)

        if not response.is_success:
            logger.error(
                "Token exchange failed",
                extra={"status_code": response.status_code, "response_body": response.text[:500]},
            )
            raise TokenExchangeError(response.status_code, response.text)

        try:
            tokens = response.json()
        except ValueError as exc:
            logger.error("Token endpoint returned a non-JSON body")
            raise TokenExchangeError(response.status_code, "invalid JSON body") from exc

        if not isinstance(tokens, dict):
            logger.error("Token endpoint returned an unexpected payload type")
            raise TokenExchangeError(response.status_code, "unexpected payload type")

        logger.debug(
            "Token exchange completed",
            extra={"response_fields": sorted(k for k in tokens if k.endswith("_token"))},
        )
        return tokens

    async def _post(self, client: httpx.AsyncClient, form: dict[str, str]) -> httpx.Response:
        return await client.post(
            self.config.token_endpoint,
            data=form,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=self.timeout_seconds,
        )


__all__ = ["DEFAULT_TIMEOUT_SECONDS", "TokenExchangeClient"]
