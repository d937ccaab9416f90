"""Tests for cache backends and the grant cache adapter."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import RedisError

from neo_authz.core.exceptions import CacheError
from neo_authz.core.value_objects import UserId, WorkspaceId
from neo_authz.features.permissions import GrantCacheAdapter, PermissionGrant, PermissionId
from neo_authz.infrastructure.cache import MemoryCache, MemoryCacheEntry, RedisCache
from neo_authz.utils.datetime import utc_now


class TestMemoryCache:
    """Test the in-memory backend."""

    @pytest.mark.asyncio
    async def test_set_get_delete(self):
        cache = MemoryCache()

        assert await cache.set("k", {"a": 1})
        assert await cache.get("k") == {"a": 1}
        assert await cache.delete("k")
        assert await cache.get("k") is None
        assert not await cache.delete("k")

    @pytest.mark.asyncio
    async def test_values_are_copied(self):
        cache = MemoryCache()
        value = {"a": [1]}
        await cache.set("k", value)

        value["a"].append(2)
        fetched = await cache.get("k")
        fetched["a"].append(3)

        assert await cache.get("k") == {"a": [1]}

    @pytest.mark.asyncio
    async def test_max_entries_evicts_oldest(self):
        cache = MemoryCache(max_entries=2)
        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.set("c", 3)

        assert await cache.get("a") is None
        assert await cache.get("c") == 3

    @pytest.mark.asyncio
    async def test_clear(self):
        cache = MemoryCache()
        await cache.set("a", 1)

        await cache.clear()

        assert await cache.get("a") is None

    def test_entry_expiry(self):
        assert MemoryCacheEntry("v", expires_at=utc_now() - timedelta(seconds=1)).is_expired()
        assert not MemoryCacheEntry("v").is_expired()


class TestRedisCache:
    """Test the Redis backend against a mocked client."""

    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.get = AsyncMock(return_value=None)
        client.set = AsyncMock(return_value=True)
        client.delete = AsyncMock(return_value=1)
        return client

    @pytest.mark.asyncio
    async def test_values_are_stored_as_json(self, client):
        cache = RedisCache(client, default_ttl=30)

        await cache.set("k", {"a": 1})

        client.set.assert_awaited_once_with("k", '{"a": 1}', ex=30)

    @pytest.mark.asyncio
    async def test_get_decodes_json(self, client):
        client.get.return_value = b'{"a": 1}'
        cache = RedisCache(client)

        assert await cache.get("k") == {"a": 1}

    @pytest.mark.asyncio
    async def test_delete(self, client):
        cache = RedisCache(client)

        assert await cache.delete("k")
        client.delete.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    async def test_redis_errors_become_cache_errors(self, client):
        client.get.side_effect = RedisError("connection refused")
        cache = RedisCache(client)

        with pytest.raises(CacheError):
            await cache.get("k")


class TestGrantCacheAdapter:
    """Test grant map caching."""

    @pytest.fixture
    def grants(self):
        grant = PermissionGrant(
            UserId("u"), WorkspaceId("ws"), PermissionId("users.view"), granted=True,
            expires_at=utc_now() + timedelta(days=1),
        )
        return {"users.view": grant}

    @pytest.mark.asyncio
    async def test_round_trip(self, grants):
        adapter = GrantCacheAdapter(MemoryCache())

        await adapter.set_user_grants(UserId("u"), WorkspaceId("ws"), grants)

        assert await adapter.get_user_grants(UserId("u"), WorkspaceId("ws")) == grants
        assert await adapter.get_user_grants(UserId("u"), WorkspaceId("other")) is None

    @pytest.mark.asyncio
    async def test_key_pattern(self, grants):
        backend = MemoryCache()
        adapter = GrantCacheAdapter(backend)

        await adapter.set_user_grants(UserId("u"), WorkspaceId("ws"), grants)

        assert await backend.get("authz:grants:u:ws") is not None

    @pytest.mark.asyncio
    async def test_invalidate(self, grants):
        adapter = GrantCacheAdapter(MemoryCache())
        await adapter.set_user_grants(UserId("u"), WorkspaceId("ws"), grants)

        assert await adapter.invalidate(UserId("u"), WorkspaceId("ws"))
        assert await adapter.get_user_grants(UserId("u"), WorkspaceId("ws")) is None

    @pytest.mark.asyncio
    async def test_invalidate_bumps_generation(self, grants):
        adapter = GrantCacheAdapter(MemoryCache())
        assert adapter.generation(UserId("u"), WorkspaceId("ws")) == 0

        await adapter.invalidate(UserId("u"), WorkspaceId("ws"))
        await adapter.invalidate(UserId("u"), WorkspaceId("ws"))

        assert adapter.generation(UserId("u"), WorkspaceId("ws")) == 2
        assert adapter.generation(UserId("u"), WorkspaceId("other")) == 0

    @pytest.mark.asyncio
    async def test_stale_generation_is_not_cached(self, grants):
        adapter = GrantCacheAdapter(MemoryCache())
        observed = adapter.generation(UserId("u"), WorkspaceId("ws"))

        await adapter.invalidate(UserId("u"), WorkspaceId("ws"))

        assert await adapter.set_user_grants(UserId("u"), WorkspaceId("ws"), grants, generation=observed) is False
        assert await adapter.get_user_grants(UserId("u"), WorkspaceId("ws")) is None

        current = adapter.generation(UserId("u"), WorkspaceId("ws"))
        assert await adapter.set_user_grants(UserId("u"), WorkspaceId("ws"), grants, generation=current)
        assert await adapter.get_user_grants(UserId("u"), WorkspaceId("ws")) == grants

    @pytest.mark.asyncio
    async def test_invalidation_during_write_drops_entry(self, grants):
        backend = MemoryCache()
        adapter = GrantCacheAdapter(backend)
        observed = adapter.generation(UserId("u"), WorkspaceId("ws"))
        original_set = backend.set

        async def set_then_invalidate(key, value, ttl=None):
            stored = await original_set(key, value, ttl=ttl)
            await adapter.invalidate(UserId("u"), WorkspaceId("ws"))
            return stored

        backend.set = set_then_invalidate

        assert await adapter.set_user_grants(UserId("u"), WorkspaceId("ws"), grants, generation=observed) is False
        assert await backend.get("authz:grants:u:ws") is None

    @pytest.mark.asyncio
    async def test_backend_failures_are_misses(self, grants):
        backend = AsyncMock()
        backend.get.side_effect = CacheError("redis down")
        backend.set.side_effect = CacheError("redis down")
        backend.delete.side_effect = CacheError("redis down")
        adapter = GrantCacheAdapter(backend)

        assert await adapter.get_user_grants(UserId("u"), WorkspaceId("ws")) is None
        assert await adapter.set_user_grants(UserId("u"), WorkspaceId("ws"), grants) is False
        assert await adapter.invalidate(UserId("u"), WorkspaceId("ws")) is False
