# =============================================================================
# lib/redis_client.py - Cache Store Adapter
# =============================================================================
# Thin async wrapper over redis.asyncio.
#
# The cache holds short-lived data only:
#   ratelimit:{ip}:{window}  - fixed-window request counters
#   refresh:{jti}            - live refresh tokens (deleted on logout)
#   categories:all           - cached category listing
#
# Postgres stays authoritative; losing the cache never loses data.
# =============================================================================

from __future__ import annotations

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from app.config import Settings
from app.exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)


class RedisStore:
    """
    Async Redis adapter with a bounded connection pool.

    Every Redis failure is raised as UpstreamUnavailableError so callers
    decide for themselves whether to fail or degrade.
    """

    def __init__(self, client: aioredis.Redis):
        self._client = client

    @classmethod
    async def connect(cls, settings: Settings) -> RedisStore:
        """
        Build the pool and verify Redis answers.

        Raises:
            UpstreamUnavailableError: If Redis can't be reached
        """
        pool = aioredis.ConnectionPool.from_url(
            settings.REDIS_URL,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        store = cls(aioredis.Redis(connection_pool=pool))
        await store.ping()
        logger.info(f"Connected to Redis (pool size {settings.REDIS_MAX_CONNECTIONS})")
        return store

    async def ping(self) -> None:
        try:
            await self._client.ping()
        except RedisError as e:
            raise UpstreamUnavailableError("Cache", str(e)) from e

    async def close(self) -> None:
        try:
            await self._client.aclose()
        except RedisError as e:
            logger.warning(f"Error closing Redis client: {e}")

    # -------------------------------------------------------------------------
    # Key/value
    # -------------------------------------------------------------------------

    async def get(self, key: str) -> str | None:
        try:
            return await self._client.get(key)
        except RedisError as e:
            raise UpstreamUnavailableError("Cache", str(e)) from e

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """Store a value, expiring after `ttl` seconds when given."""
        try:
            await self._client.set(key, value, ex=ttl)
        except RedisError as e:
            raise UpstreamUnavailableError("Cache", str(e)) from e

    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if it existed."""
        try:
            return bool(await self._client.delete(key))
        except RedisError as e:
            raise UpstreamUnavailableError("Cache", str(e)) from e

    # -------------------------------------------------------------------------
    # Counters
    # -------------------------------------------------------------------------

    async def incr_window(self, key: str, window_seconds: int) -> int:
        """
        Increment a fixed-window counter.

        INCR is atomic, so concurrent requests from one client never lose a
        count. The first hit in a window sets the expiry; the key vanishes
        when the window ends.

        Returns:
            The count after this increment
        """
        try:
            count = await self._client.incr(key)
            if count == 1:
                await self._client.expire(key, window_seconds)
            return count
        except RedisError as e:
            raise UpstreamUnavailableError("Cache", str(e)) from e
