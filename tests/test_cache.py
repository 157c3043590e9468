"""Tests for the citation verdict cache."""

import json

from brandlens.config import Settings
from brandlens.utils.cache import (
    CitationCache,
    InMemoryCacheBackend,
    RedisCacheBackend,
    build_citation_cache,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class FakeRedis:
    """Minimal async stand-in recording SETEX calls"""

    def __init__(self) -> None:
        self.store = {}
        self.ttls = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl

    async def delete(self, key):
        self.store.pop(key, None)


class TestInMemoryBackend:
    async def test_entries_expire(self) -> None:
        clock = FakeClock()
        backend = InMemoryCacheBackend(clock=clock)

        await backend.set("k", {"v": 1}, ttl=60)
        assert await backend.get("k") == {"v": 1}

        clock.now += 61
        assert await backend.get("k") is None
        assert len(backend) == 0

    async def test_delete(self) -> None:
        backend = InMemoryCacheBackend()
        await backend.set("k", "v", ttl=60)
        await backend.delete("k")
        await backend.delete("missing")
        assert await backend.get("k") is None


class TestCitationCache:
    async def test_verdict_roundtrip_and_invalidate(self) -> None:
        cache = CitationCache(InMemoryCacheBackend(), ttl=60)

        assert await cache.get_verdict("abc") is None
        await cache.set_verdict("abc", "yes", 0.8)
        assert await cache.get_verdict("abc") == {"brand_mention": "yes", "brand_mention_confidence": 0.8}

        await cache.invalidate("abc")
        assert await cache.get_verdict("abc") is None

    async def test_redis_backend_uses_setex(self) -> None:
        client = FakeRedis()
        cache = CitationCache(RedisCacheBackend(client=client, prefix="test"), ttl=86400)

        await cache.set_verdict("abc", "no", 0.9)

        key = "test:citation_mention:abc"
        assert client.ttls[key] == 86400
        assert json.loads(client.store[key]) == {"brand_mention": "no", "brand_mention_confidence": 0.9}
        assert await cache.get_verdict("abc") == {"brand_mention": "no", "brand_mention_confidence": 0.9}

    async def test_non_dict_values_ignored(self) -> None:
        client = FakeRedis()
        client.store["test:citation_mention:abc"] = "garbage"
        cache = CitationCache(RedisCacheBackend(client=client, prefix="test"))

        assert await cache.get_verdict("abc") is None


def test_build_citation_cache_backends():
    memory = build_citation_cache(Settings(CITATION_CACHE_BACKEND="memory", CITATION_CACHE_TTL=10))
    assert isinstance(memory.backend, InMemoryCacheBackend)
    assert memory.ttl == 10

    redis_cache = build_citation_cache(Settings(CITATION_CACHE_BACKEND="REDIS"))
    assert isinstance(redis_cache.backend, RedisCacheBackend)
    assert redis_cache.ttl == 86400
