"""
Cache utilities
Citation verdict cache with in-process and Redis backing stores
"""

import json
import time
from typing import Any, Dict, Optional, Protocol, Tuple

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from brandlens.config import Settings, get_settings

# Connection pool
_pool: Optional[ConnectionPool] = None


async def get_redis_pool() -> ConnectionPool:
    """Get or create Redis connection pool"""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = ConnectionPool.from_url(
            settings.REDIS_URL,
            max_connections=20,
            decode_responses=True,
        )
    return _pool


async def get_redis() -> redis.Redis:
    """Get Redis client"""
    pool = await get_redis_pool()
    return redis.Redis(connection_pool=pool)


async def close_redis():
    """Close Redis connections"""
    global _pool
    if _pool is not None:
        await _pool.disconnect()
        _pool = None


class CacheBackend(Protocol):
    """Key/value store with per-entry TTL"""

    async def get(self, key: str) -> Optional[Any]:
        ...

    async def set(self, key: str, value: Any, ttl: int) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...


class InMemoryCacheBackend:
    """Process-local store; expired entries are evicted when read"""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: Any, ttl: int) -> None:
        self._entries[key] = (self._clock() + ttl, value)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)


class RedisCacheBackend:
    """Shared store for multi-instance deployments"""

    def __init__(self, client: Optional[redis.Redis] = None, prefix: str = "brandlens"):
        self._client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        """Generate full cache key with prefix"""
        return f"{self.prefix}:{key}"

    async def _get_client(self) -> redis.Redis:
        if self._client is not None:
            return self._client
        return await get_redis()

    async def get(self, key: str) -> Optional[Any]:
        client = await self._get_client()
        value = await client.get(self._key(key))
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    async def set(self, key: str, value: Any, ttl: int) -> None:
        client = await self._get_client()
        await client.setex(self._key(key), ttl, json.dumps(value))

    async def delete(self, key: str) -> None:
        client = await self._get_client()
        await client.delete(self._key(key))


class CitationCache:
    """Brand verdicts per citation URL hash"""

    def __init__(self, backend: CacheBackend, ttl: int = 86400):
        self.backend = backend
        self.ttl = ttl

    def _key(self, url_hash: str) -> str:
        return f"citation_mention:{url_hash}"

    async def get_verdict(self, url_hash: str) -> Optional[Dict[str, Any]]:
        """Cached {"brand_mention", "brand_mention_confidence"} or None"""
        value = await self.backend.get(self._key(url_hash))
        return value if isinstance(value, dict) else None

    async def set_verdict(self, url_hash: str, brand_mention: str, confidence: float) -> None:
        await self.backend.set(
            self._key(url_hash),
            {"brand_mention": brand_mention, "brand_mention_confidence": confidence},
            self.ttl,
        )

    async def invalidate(self, url_hash: str) -> None:
        await self.backend.delete(self._key(url_hash))


def build_citation_cache(settings: Optional[Settings] = None) -> CitationCache:
    """Citation cache on the backend selected by CITATION_CACHE_BACKEND"""
    settings = settings or get_settings()
    if settings.CITATION_CACHE_BACKEND == "redis":
        backend: CacheBackend = RedisCacheBackend(prefix=settings.APP_NAME)
    else:
        backend = InMemoryCacheBackend()
    return CitationCache(backend, ttl=settings.CITATION_CACHE_TTL)
