"""OAuth2 Authorization Code Flow with PKCE: authentication state machine.

Flows:
1. initiate: generate state + PKCE, store both (5 min, single use), return
   the identity provider authorization URL. A caller that already holds a
   valid session is short-circuited to AUTHENTICATED.
2. complete: consume state and verifier, exchange the code, issue a session.
3. validate: resolve a cookie session id to a live SessionRecord.

States: ANONYMOUS -> AWAITING_CALLBACK -> AUTHENTICATED, with failure sinks
IDP_ERROR, MALFORMED_CALLBACK, EXPIRED_REQUEST and AUTH_FAILED. Failure
outcomes carry a user-facing message only; the root cause is logged.

References:
- OAuth2: RFC 6749
- PKCE: RFC 7636
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

import httpx
from pydantic import ValidationError

from libs.auth_session import messages
from libs.auth_session.config import IdentityProviderConfig
from libs.auth_session.exceptions import (
    SessionStoreError,
    TokenExchangeError,
    TransactionStoreError,
)
from libs.auth_session.keys import redact
from libs.auth_session.pkce import generate_pkce_challenge, generate_state, is_valid_state
from libs.auth_session.session_issuer import SessionIssuer
from libs.auth_session.session_store import SessionRecord, SessionStore
from libs.auth_session.session_token import SessionTokenCodec
from libs.auth_session.token_client import TokenExchangeClient
from libs.auth_session.transaction_store import TransactionStore
from libs.auth_session.url_builder import build_authorization_url

logger = logging.getLogger(__name__)


class AuthState(str, Enum):
    ANONYMOUS = "anonymous"
    AWAITING_CALLBACK = "awaiting_callback"
    AUTHENTICATED = "authenticated"
    IDP_ERROR = "idp_error"
    MALFORMED_CALLBACK = "malformed_callback"
    EXPIRED_REQUEST = "expired_request"
    AUTH_FAILED = "auth_failed"


FAILURE_MESSAGES: dict[AuthState, str] = {
    AuthState.IDP_ERROR: messages.IDP_ERROR,
    AuthState.MALFORMED_CALLBACK: messages.INVALID_AUTHENTICATION_RESPONSE,
    AuthState.EXPIRED_REQUEST: messages.AUTHENTICATION_REQUEST_EXPIRED,
    AuthState.AUTH_FAILED: messages.AUTHENTICATION_FAILED,
}


@dataclass
class AuthOutcome:
    """Result of an orchestrator transition."""

    state: AuthState
    redirect_url: str | None = None
    session_id: str | None = None
    session: SessionRecord | None = None
    error_message: str | None = None

    @property
    def authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    @classmethod
    def failure(cls, state: AuthState, error_message: str | None = None) -> AuthOutcome:
        return cls(state=state, error_message=error_message or FAILURE_MESSAGES[state])


def _anonymous() -> AuthOutcome:
    return AuthOutcome(state=AuthState.ANONYMOUS)


class AuthenticationOrchestrator:
    """Sequences crypto, transaction storage, token exchange and sessions."""

    def __init__(
        self,
        idp_config: IdentityProviderConfig,
        transaction_store: TransactionStore,
        token_client: TokenExchangeClient,
        session_store: SessionStore,
        session_issuer: SessionIssuer,
        token_codec: SessionTokenCodec,
        post_login_redirect: str = "/",
    ):
        self.idp_config = idp_config
        self.transactions = transaction_store
        self.token_client = token_client
        self.session_store = session_store
        self.session_issuer = session_issuer
        self.token_codec = token_codec
        self.post_login_redirect = post_login_redirect

    async def initiate(self, session_id: str | None = None) -> AuthOutcome:
        """Start login, or short-circuit when a valid session already exists.

        Returns:
            AUTHENTICATED with the post-login redirect, or AWAITING_CALLBACK
            with the authorization URL

        Raises:
            ConfigurationError: If identity provider settings are incomplete
            TransactionStoreError: If state/verifier cannot be stored
        """
        if session_id:
            current = await self.validate(session_id)
            if current.authenticated:
                logger.info(
                    "Login skipped, session already valid",
                    extra={"session_id": redact(session_id)},
                )
                current.redirect_url = self.post_login_redirect
                return current

        state = generate_state()
        pkce = generate_pkce_challenge()
        # Built first so a misconfiguration leaves nothing behind in the store
        authorization_url = build_authorization_url(self.idp_config, state, pkce.code_challenge)

        await self.transactions.store_state(state)
        await self.transactions.store_pkce_verifier(state, pkce.code_verifier)

        logger.info("OAuth login initiated", extra={"state": redact(state)})
        return AuthOutcome(state=AuthState.AWAITING_CALLBACK, redirect_url=authorization_url)

    async def complete(
        self,
        code: str | None,
        state: str | None,
        error: str | None = None,
        error_description: str | None = None,
    ) -> AuthOutcome:
        """Handle the identity provider callback.

        Raises:
            ConfigurationError: If token endpoint settings are incomplete
        """
        logger.debug(
            "Starting OAuth callback authentication",
            extra={"has_code": bool(code), "has_state": bool(state), "has_error": bool(error)},
        )

        if error:
            logger.warning(
                "Identity provider returned an error",
                extra={"idp_error": error[:100], "idp_error_description": (error_description or "")[:200]},
            )
            return AuthOutcome.failure(AuthState.IDP_ERROR)

        if not code or not state or not is_valid_state(state):
            logger.warning("Malformed OAuth callback", extra={"has_code": bool(code), "has_state": bool(state)})
            return AuthOutcome.failure(AuthState.MALFORMED_CALLBACK)

        try:
            if not await self.transactions.validate_state(state):
                logger.error("OAuth state validation failed", extra={"error_code": "INVALID_STATE"})
                return AuthOutcome.failure(AuthState.EXPIRED_REQUEST)

            code_verifier = await self.transactions.retrieve_pkce_verifier(state)
        except TransactionStoreError as exc:
            logger.error("OAuth transaction lookup failed", extra={"error": str(exc)})
            return AuthOutcome.failure(AuthState.AUTH_FAILED)

        if code_verifier is None:
            logger.error("PKCE verifier not found for state", extra={"error_code": "MISSING_PKCE"})
            return AuthOutcome.failure(AuthState.EXPIRED_REQUEST)

        try:
            # Upstream tokens are not persisted; the session is gated by its own TTL
            await self.token_client.exchange_code_for_tokens(code, code_verifier)
        except TokenExchangeError as exc:
            logger.error(
                "OAuth token exchange rejected",
                extra={"error_code": "TOKEN_EXCHANGE_FAILED", "status_code": exc.status_code},
            )
            return AuthOutcome.failure(AuthState.AUTH_FAILED)
        except httpx.HTTPError as exc:
            logger.error(
                "OAuth token exchange network error",
                extra={"error_code": "TOKEN_EXCHANGE_FAILED", "error_type": type(exc).__name__},
            )
            return AuthOutcome.failure(AuthState.AUTH_FAILED)

        try:
            record = await self.session_issuer.issue()
        except SessionStoreError as exc:
            logger.error(
                "Session creation failed after token exchange",
                extra={"error_code": "SESSION_CREATE_FAILED", "error": str(exc)},
            )
            return AuthOutcome.failure(AuthState.AUTH_FAILED)

        logger.info(
            "OAuth authentication completed successfully",
            extra={"session_id": redact(record.session_id)},
        )
        return AuthOutcome(
            state=AuthState.AUTHENTICATED,
            redirect_url=self.post_login_redirect,
            session_id=record.session_id,
            session=record,
        )

    async def validate(self, session_id: str | None) -> AuthOutcome:
        """Resolve a session id to AUTHENTICATED (with record) or ANONYMOUS."""
        if not session_id:
            return _anonymous()

        try:
            payload = await self.session_store.get(session_id)
        except SessionStoreError as exc:
            logger.error(
                "Session validation error",
                extra={"session_id": redact(session_id), "error_type": type(exc).__name__},
            )
            return _anonymous()

        if payload is None:
            return _anonymous()

        try:
            record = SessionRecord.model_validate(payload)
        except ValidationError:
            logger.error("Session record has unexpected shape", extra={"session_id": redact(session_id)})
            return _anonymous()

        claims = self.token_codec.verify(record.session_token)
        if claims is None or claims.session_id != session_id:
            logger.warning("Session token does not match session", extra={"session_id": redact(session_id)})
            return _anonymous()
        if claims.expires_at != record.expires_at:
            logger.warning(
                "Session token expiry does not match record",
                extra={"session_id": redact(session_id)},
            )
            return _anonymous()

        return AuthOutcome(state=AuthState.AUTHENTICATED, session_id=session_id, session=record)

    async def logout(self, session_id: str | None) -> int:
        """Delete the session; never raises."""
        if not session_id:
            return 0
        return await self.session_store.delete(session_id)


__all__ = ["AuthOutcome", "AuthState", "AuthenticationOrchestrator", "FAILURE_MESSAGES"]
