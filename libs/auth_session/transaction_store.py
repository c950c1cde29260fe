"""OAuth2 temporary transaction storage in Redis.

CRITICAL SECURITY: The CSRF state marker and the PKCE verifier are stored
with a 5-minute TTL and SINGLE-USE enforcement to prevent CSRF and replay.

Redis Schema:
  auth:state:{state} -> "1"            TTL 300s
  auth:pkce:{state}  -> code_verifier  TTL 300s

Single-Use Enforcement:
  - The state marker is consumed by DEL; only the caller that observes a
    delete count of 1 wins
  - The verifier is consumed by GETDEL
  - Expired entries are purged by Redis
"""

from __future__ import annotations

import logging

import redis.asyncio
from redis.exceptions import RedisError

from libs.auth_session.exceptions import TransactionStoreError
from libs.auth_session.keys import AuthKeys, redact
from libs.auth_session.pkce import validate_state_format

logger = logging.getLogger(__name__)

STATE_TTL_SECONDS = 300
STATE_MARKER = "1"


class TransactionStore:
    """Manages one-time OAuth2 transaction entries in Redis."""

    def __init__(self, redis_client: redis.asyncio.Redis, ttl_seconds: int = STATE_TTL_SECONDS):
        """Initialize transaction store.

        Args:
            redis_client: Redis async client (same instance as the session store)
            ttl_seconds: Entry TTL in seconds (default: 300 = 5 minutes)
        """
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds

    async def store_state(self, state: str) -> None:
        """Store the CSRF state marker.

        Raises:
            InvalidStateError: If the state is malformed
            TransactionStoreError: If Redis is unavailable
        """
        key = AuthKeys.oauth_state(validate_state_format(state))
        try:
            await self.redis.set(key, STATE_MARKER, ex=self.ttl_seconds)
        except RedisError as exc:
            logger.error("Failed to store OAuth state", extra={"error": str(exc)})
            raise TransactionStoreError("OAuth state storage unavailable") from exc

        logger.info(
            "OAuth state stored",
            extra={"state": redact(state), "ttl_seconds": self.ttl_seconds},
        )

    async def validate_state(self, state: str) -> bool:
        """Consume the CSRF state marker.

        Returns:
            True exactly once per stored state; False when absent, expired,
            already consumed, or malformed
        """
        try:
            key = AuthKeys.oauth_state(validate_state_format(state))
        except ValueError:
            return False

        try:
            deleted = await self.redis.delete(key)
        except RedisError as exc:
            logger.error("Failed to validate OAuth state", extra={"error": str(exc)})
            raise TransactionStoreError("OAuth state storage unavailable") from exc

        if deleted != 1:
            logger.warning(
                "OAuth state not found or already used",
                extra={"state": redact(state)},
            )
            return False

        logger.info("OAuth state validated and consumed", extra={"state": redact(state)})
        return True

    async def store_pkce_verifier(self, state: str, code_verifier: str) -> None:
        """Store the PKCE code verifier bound to a state."""
        key = AuthKeys.pkce_verifier(validate_state_format(state))
        try:
            await self.redis.set(key, code_verifier, ex=self.ttl_seconds)
        except RedisError as exc:
            logger.error("Failed to store PKCE verifier", extra={"error": str(exc)})
            raise TransactionStoreError("OAuth state storage unavailable") from exc

    async def retrieve_pkce_verifier(self, state: str) -> str | None:
        """Retrieve and DELETE the PKCE verifier (single-use enforcement).

        Returns:
            The verifier on first retrieval, None afterwards or when absent
        """
        try:
            key = AuthKeys.pkce_verifier(validate_state_format(state))
        except ValueError:
            return None

        try:
            value = await self.redis.getdel(key)
        except RedisError as exc:
            logger.error("Failed to retrieve PKCE verifier", extra={"error": str(exc)})
            raise TransactionStoreError("OAuth state storage unavailable") from exc

        if value is None:
            logger.warning("PKCE verifier not found for state", extra={"state": redact(state)})
            return None

        return value.decode("utf-8") if isinstance(value, bytes) else str(value)


__all__ = ["STATE_TTL_SECONDS", "TransactionStore"]
