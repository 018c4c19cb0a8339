# =============================================================================
# tests/test_redis_client.py - Cache Adapter Tests
# =============================================================================

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.exceptions import UpstreamUnavailableError
from lib.redis_client import RedisStore


@pytest.fixture
def redis():
    return AsyncMock()


class TestIncrWindow:
    """Tests for RedisStore.incr_window."""

    @pytest.mark.asyncio
    async def test_first_hit_sets_expiry(self, redis):
        redis.incr.return_value = 1
        store = RedisStore(redis)

        count = await store.incr_window("ratelimit:1.2.3.4:100", 60)

        assert count == 1
        redis.expire.assert_awaited_once_with("ratelimit:1.2.3.4:100", 60)

    @pytest.mark.asyncio
    async def test_later_hits_keep_expiry(self, redis):
        redis.incr.return_value = 7
        store = RedisStore(redis)

        assert await store.incr_window("ratelimit:1.2.3.4:100", 60) == 7
        redis.expire.assert_not_awaited()


class TestKeyValue:
    @pytest.mark.asyncio
    async def test_set_with_ttl(self, redis):
        store = RedisStore(redis)

        await store.set("refresh:abc", "user-1", ttl=3600)

        redis.set.assert_awaited_once_with("refresh:abc", "user-1", ex=3600)

    @pytest.mark.asyncio
    async def test_delete_reports_existence(self, redis):
        redis.delete.return_value = 0
        store = RedisStore(redis)

        assert await store.delete("refresh:gone") is False


class TestFailures:
    """Every Redis error surfaces as UpstreamUnavailableError."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation,args", [
        ("get", ("k",)),
        ("set", ("k", "v")),
        ("delete", ("k",)),
        ("incr_window", ("k", 60)),
        ("ping", ()),
    ])
    async def test_errors_are_translated(self, redis, operation, args):
        redis_method = "incr" if operation == "incr_window" else operation
        getattr(redis, redis_method).side_effect = RedisConnectionError("connection refused")
        store = RedisStore(redis)

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await getattr(store, operation)(*args)

        assert exc_info.value.details["service"] == "Cache"

    @pytest.mark.asyncio
    async def test_close_swallows_errors(self, redis):
        redis.aclose.side_effect = RedisConnectionError("already closed")

        await RedisStore(redis).close()
