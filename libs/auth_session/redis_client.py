"""Redis connection handle for session and OAuth transaction storage.

Owns the lifecycle of the async Redis client so that stores receive an
explicit client instead of a module-level singleton.

Example:
    >>> connection = RedisConnection(RedisConfig(host="localhost", port=6379))
    >>> client = await connection.connect()
    >>> store = SessionStore(client, session_ttl_seconds=14400)
    >>> await connection.disconnect()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import redis.asyncio as redis_async
from redis.exceptions import RedisError

from libs.auth_session.exceptions import StoreConnectionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RedisConfig:
    """Parsed Redis connection configuration."""

    host: str = "127.0.0.1"
    port: int = 6379
    db: int = 0
    username: str | None = None
    password: str | None = None
    use_tls: bool = False
    socket_timeout: float = 5.0


def create_async_redis(config: RedisConfig) -> redis_async.Redis:
    """Create an async Redis client from parsed config."""

    return redis_async.Redis(
        host=config.host,
        port=config.port,
        db=config.db,
        username=config.username or None,
        password=config.password or None,
        ssl=config.use_tls,
        socket_timeout=config.socket_timeout,
        socket_connect_timeout=config.socket_timeout,
        decode_responses=True,
    )


class RedisConnection:
    """Explicit connect/disconnect wrapper around ``redis.asyncio.Redis``."""

    def __init__(self, config: RedisConfig, client: redis_async.Redis | None = None) -> None:
        self.config = config
        self._client = client

    @property
    def client(self) -> redis_async.Redis:
        if self._client is None:
            raise StoreConnectionError("Redis client is not connected")
        return self._client

    async def connect(self) -> redis_async.Redis:
        """Create the client and verify the server answers PING.

        Raises:
            StoreConnectionError: If the server cannot be reached
        """
        if self._client is None:
            self._client = create_async_redis(self.config)

        try:
            await self._client.ping()
        except RedisError as exc:
            logger.error(
                "Redis connection failed",
                extra={"host": self.config.host, "port": self.config.port, "error": str(exc)},
            )
            raise StoreConnectionError("Connection to session store failed") from exc

        logger.info(
            "Connected to Redis session store",
            extra={"host": self.config.host, "port": self.config.port, "db": self.config.db},
        )
        return self._client

    async def disconnect(self) -> None:
        if self._client is None:
            return
        try:
            await self._client.aclose()
        except RedisError as exc:
            logger.warning("Error closing Redis connection", extra={"error": str(exc)})
        finally:
            self._client = None

    async def health_check(self) -> bool:
        if self._client is None:
            return False
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False


__all__ = ["RedisConfig", "RedisConnection", "create_async_redis"]
