"""Authentication strategies sharing one session-issuing path.

``OAuthStrategy`` completes the identity provider callback; ``PasswordStrategy``
checks a shared secret. Both end in ``SessionIssuer.issue`` and return an
``AuthOutcome`` so routes treat them the same way.
"""

from __future__ import annotations

import hmac
import logging
from abc import ABC, abstractmethod
from typing import Any

from libs.auth_session import messages
from libs.auth_session.exceptions import SessionStoreError
from libs.auth_session.keys import redact
from libs.auth_session.orchestrator import AuthenticationOrchestrator, AuthOutcome, AuthState
from libs.auth_session.session_issuer import SessionIssuer

logger = logging.getLogger(__name__)


class AuthStrategy(ABC):
    """Base class for authentication strategies."""

    name: str

    @abstractmethod
    async def authenticate(self, **params: Any) -> AuthOutcome:
        """Authenticate from request parameters and issue a session on success."""


class OAuthStrategy(AuthStrategy):
    name = "oauth"

    def __init__(self, orchestrator: AuthenticationOrchestrator) -> None:
        self.orchestrator = orchestrator

    async def authenticate(self, **params: Any) -> AuthOutcome:
        """Complete the callback.

        Args:
            code (str | None): Authorization code.
            state (str | None): CSRF state.
            error (str | None): Provider error code.
            error_description (str | None): Provider error text.
        """
        return await self.orchestrator.complete(
            code=params.get("code"),
            state=params.get("state"),
            error=params.get("error"),
            error_description=params.get("error_description"),
        )


class PasswordStrategy(AuthStrategy):
    """Shared-secret password check."""

    name = "password"

    def __init__(
        self,
        shared_password: str,
        session_issuer: SessionIssuer,
        post_login_redirect: str = "/",
    ) -> None:
        self._shared_password = shared_password
        self.session_issuer = session_issuer
        self.post_login_redirect = post_login_redirect

    async def authenticate(self, **params: Any) -> AuthOutcome:
        """Authenticate with a submitted password.

        Args:
            password (str): Password from the sign-in form.
        """
        password = params.get("password")
        if not isinstance(password, str) or not password.strip() or not self._shared_password:
            return AuthOutcome.failure(AuthState.AUTH_FAILED, messages.INVALID_PASSWORD)

        if not hmac.compare_digest(password.encode("utf-8"), self._shared_password.encode("utf-8")):
            logger.info("Password authentication rejected")
            return AuthOutcome.failure(AuthState.AUTH_FAILED, messages.INVALID_PASSWORD)

        try:
            record = await self.session_issuer.issue()
        except SessionStoreError as exc:
            logger.error("Session creation failed after password check", extra={"error": str(exc)})
            return AuthOutcome.failure(AuthState.AUTH_FAILED, messages.SERVICE_UNAVAILABLE)

        logger.info("Password authentication succeeded", extra={"session_id": redact(record.session_id)})
        return AuthOutcome(
            state=AuthState.AUTHENTICATED,
            redirect_url=self.post_login_redirect,
            session_id=record.session_id,
            session=record,
        )


__all__ = ["AuthStrategy", "OAuthStrategy", "PasswordStrategy"]
