"""Signed, self-contained session tokens (HS256 JWT).

A session token embeds the session id, issued-at and expiry so it can be
checked by value in addition to the store lookup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import jwt

logger = logging.getLogger(__name__)

SESSION_TOKEN_ALGORITHM = "HS256"
MIN_SECRET_LENGTH = 32


@dataclass(frozen=True)
class SessionTokenClaims:
    session_id: str
    issued_at: datetime
    expires_at: datetime


class SessionTokenCodec:
    """Mints and verifies session tokens with a shared HMAC secret."""

    def __init__(self, secret: str, algorithm: str = SESSION_TOKEN_ALGORITHM) -> None:
        if len(secret) < MIN_SECRET_LENGTH:
            raise ValueError(f"Session signing secret must be at least {MIN_SECRET_LENGTH} characters")
        self._secret = secret
        self.algorithm = algorithm

    def mint(self, session_id: str, issued_at: datetime, expires_at: datetime) -> str:
        """Sign a token whose ``exp`` equals ``expires_at`` (whole seconds)."""
        payload: dict[str, Any] = {
            "session_id": session_id,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> SessionTokenClaims | None:
        """Return claims for a valid, unexpired token; None otherwise."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "session_id"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Session token expired")
            return None
        except jwt.InvalidTokenError as exc:
            logger.warning("Session token rejected", extra={"error_type": type(exc).__name__})
            return None

        return SessionTokenClaims(
            session_id=str(payload["session_id"]),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        )


__all__ = ["SESSION_TOKEN_ALGORITHM", "SessionTokenClaims", "SessionTokenCodec"]
