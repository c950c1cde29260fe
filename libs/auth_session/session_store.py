"""Redis session store.

Design:
- Key format: session:{session_id}
- Value: JSON object (SessionRecord by default)
- TTL: session_ttl_seconds (absolute lifetime, enforced by Redis)
- Stored ``expires_at`` is re-checked on read so a record outliving its TTL
  (clock skew, manual EXPIRE) is still rejected

Writes are validated before touching Redis: every required field must be
present and non-empty, and the serialized payload must fit in 50,000 bytes.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

import redis.asyncio
from pydantic import BaseModel
from redis.exceptions import RedisError

from libs.auth_session.exceptions import (
    SessionCorruptedError,
    SessionDataInvalidError,
    SessionNotFoundError,
    SessionPayloadTooLargeError,
    SessionStoreError,
)
from libs.auth_session.keys import AuthKeys, redact

logger = logging.getLogger(__name__)

MAX_SESSION_BYTES = 50_000
DEFAULT_SESSION_TTL_SECONDS = 4 * 60 * 60

SESSION_RECORD_FIELDS = ("session_id", "session_token", "created_at", "expires_at")
USER_TOKEN_FIELDS = ("user_id", "access_token", "refresh_token", "token_expiry")


class SessionRecord(BaseModel):
    """Session record stored under ``session:{session_id}``.

    Attributes:
        session_id: Opaque, unguessable identifier (cookie value)
        session_token: Signed token embedding session_id, iat and exp
        created_at: Creation timestamp (UTC)
        expires_at: created_at + session TTL (UTC)
    """

    session_id: str
    session_token: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at <= (now or datetime.now(UTC))


class SessionStore:
    """CRUD + TTL lifecycle for session records in Redis.

    Example:
        >>> store = SessionStore(redis_client, session_ttl_seconds=14400)
        >>> await store.create("abc123", record.model_dump(mode="json"))
        >>> payload = await store.get("abc123")
    """

    def __init__(
        self,
        redis_client: redis.asyncio.Redis,
        session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
        required_fields: tuple[str, ...] = SESSION_RECORD_FIELDS,
        max_payload_bytes: int = MAX_SESSION_BYTES,
    ):
        """Initialize session store.

        Args:
            redis_client: Redis async client, injected by the caller
            session_ttl_seconds: Session lifetime applied on every write
            required_fields: Fields that must be present and non-empty
            max_payload_bytes: Upper bound on the serialized payload size
        """
        if session_ttl_seconds <= 0:
            raise ValueError("session_ttl_seconds must be positive")

        self.redis = redis_client
        self.session_ttl_seconds = session_ttl_seconds
        self.required_fields = required_fields
        self.max_payload_bytes = max_payload_bytes

    async def create(self, session_id: str, payload: dict[str, Any]) -> None:
        """Validate and write a new session with TTL.

        Raises:
            SessionDataInvalidError: If a required field is missing or empty
            SessionPayloadTooLargeError: If the payload exceeds the size limit
            SessionStoreError: If Redis rejects the write
        """
        serialized = self._serialize(payload)
        key = AuthKeys.session(session_id)

        try:
            await self.redis.setex(key, self.session_ttl_seconds, serialized)
        except RedisError as exc:
            logger.error(
                "Error creating session",
                extra={"session_id": redact(session_id), "error": str(exc)},
            )
            await self._cleanup_partial_write(key, session_id)
            raise SessionStoreError("Session creation failed") from exc

        logger.info(
            "Session created",
            extra={"session_id": redact(session_id), "ttl_seconds": self.session_ttl_seconds},
        )

    async def get(self, session_id: str) -> dict[str, Any] | None:
        """Read a session payload.

        Returns:
            The stored payload, or None when absent or past its ``expires_at``
            (the record is deleted in that case)

        Raises:
            SessionCorruptedError: If the stored value is not a JSON object or
                carries an unparseable ``expires_at``
            SessionStoreError: If Redis is unavailable
        """
        if not session_id:
            return None

        key = AuthKeys.session(session_id)
        try:
            raw = await self.redis.get(key)
        except RedisError as exc:
            logger.error(
                "Error retrieving session",
                extra={"session_id": redact(session_id), "error": str(exc)},
            )
            raise SessionStoreError("Session retrieval failed") from exc

        if raw is None:
            logger.debug("Session not found or expired", extra={"session_id": redact(session_id)})
            return None

        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.error("Corrupted session data", extra={"session_id": redact(session_id)})
            raise SessionCorruptedError("Invalid session data format") from exc

        if not isinstance(payload, dict):
            logger.error("Corrupted session data", extra={"session_id": redact(session_id)})
            raise SessionCorruptedError("Invalid session data format")

        if "expires_at" in payload:
            expires_at = _parse_timestamp(payload["expires_at"])
            if expires_at is None:
                logger.error("Session has invalid expires_at", extra={"session_id": redact(session_id)})
                raise SessionCorruptedError("Invalid session expiry")
            if expires_at <= datetime.now(UTC):
                logger.info("Session expired on read", extra={"session_id": redact(session_id)})
                await self.delete(session_id)
                return None

        return payload

    async def update(self, session_id: str, payload: dict[str, Any]) -> None:
        """Rewrite an existing session with a refreshed TTL.

        Raises:
            SessionNotFoundError: If the session key does not exist
            SessionDataInvalidError: If a required field is missing or empty
            SessionPayloadTooLargeError: If the payload exceeds the size limit
            SessionStoreError: If Redis is unavailable
        """
        key = AuthKeys.session(session_id)

        # exists-then-write: a concurrent delete can be resurrected here; ids are
        # single-owner per browser
        try:
            exists = await self.redis.exists(key)
        except RedisError as exc:
            raise SessionStoreError("Session update failed") from exc

        if not exists:
            logger.warning("Session not found for update", extra={"session_id": redact(session_id)})
            raise SessionNotFoundError(f"Session not found: {redact(session_id)}")

        serialized = self._serialize(payload)
        try:
            await self.redis.setex(key, self.session_ttl_seconds, serialized)
        except RedisError as exc:
            logger.error(
                "Error updating session",
                extra={"session_id": redact(session_id), "error": str(exc)},
            )
            raise SessionStoreError("Session update failed") from exc

        logger.info("Session updated", extra={"session_id": redact(session_id)})

    async def delete(self, session_id: str) -> int:
        """Delete a session. Idempotent and never raises.

        Returns:
            Number of keys removed (0 or 1)
        """
        if not session_id:
            return 0

        try:
            deleted = int(await self.redis.delete(AuthKeys.session(session_id)))
        except RedisError as exc:
            logger.warning(
                "Error deleting session",
                extra={"session_id": redact(session_id), "error": str(exc)},
            )
            return 0

        logger.info(
            "Session deleted",
            extra={"session_id": redact(session_id), "existed": deleted > 0},
        )
        return deleted

    async def exists(self, session_id: str) -> bool:
        try:
            return int(await self.redis.exists(AuthKeys.session(session_id))) == 1
        except RedisError as exc:
            raise SessionStoreError("Session lookup failed") from exc

    async def get_ttl(self, session_id: str) -> int:
        """Remaining TTL in seconds, -1 if no TTL, -2 if not found."""
        try:
            return int(await self.redis.ttl(AuthKeys.session(session_id)))
        except RedisError as exc:
            raise SessionStoreError("Session TTL lookup failed") from exc

    async def refresh_ttl(self, session_id: str) -> bool:
        """Reset the session TTL to the full lifetime.

        Returns:
            False when the session does not exist
        """
        try:
            refreshed = await self.redis.expire(AuthKeys.session(session_id), self.session_ttl_seconds)
        except RedisError as exc:
            raise SessionStoreError("Session TTL refresh failed") from exc

        if not refreshed:
            logger.warning(
                "Cannot refresh TTL for non-existent session",
                extra={"session_id": redact(session_id)},
            )
            return False

        logger.info("Session TTL refreshed", extra={"session_id": redact(session_id)})
        return True

    def _serialize(self, payload: dict[str, Any]) -> str:
        if not isinstance(payload, dict):
            raise SessionDataInvalidError("Invalid session data: payload must be an object")

        missing = [name for name in self.required_fields if not payload.get(name)]
        if missing:
            raise SessionDataInvalidError(
                f"Invalid session data: missing required fields {missing}"
            )

        try:
            serialized = json.dumps(payload)
        except (TypeError, ValueError) as exc:
            raise SessionDataInvalidError("Invalid session data: not JSON serializable") from exc

        if len(serialized.encode("utf-8")) > self.max_payload_bytes:
            raise SessionPayloadTooLargeError("Session data exceeds maximum size limit")

        return serialized

    async def _cleanup_partial_write(self, key: str, session_id: str) -> None:
        try:
            await self.redis.delete(key)
        except RedisError as cleanup_exc:
            logger.warning(
                "Session cleanup after failed write also failed",
                extra={"session_id": redact(session_id), "error": str(cleanup_exc)},
            )


def _parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


__all__ = [
    "DEFAULT_SESSION_TTL_SECONDS",
    "MAX_SESSION_BYTES",
    "SESSION_RECORD_FIELDS",
    "SessionRecord",
    "SessionStore",
    "USER_TOKEN_FIELDS",
]
