"""
Utility modules for brandlens
"""

from .database import (
    get_db,
    get_db_context,
    init_db,
    close_db,
)
from .security import (
    verify_bearer_secret,
    hash_url,
)
from .cache import (
    CacheBackend,
    InMemoryCacheBackend,
    RedisCacheBackend,
    CitationCache,
    build_citation_cache,
    get_redis,
    close_redis,
)

__all__ = [
    # Database
    "get_db",
    "get_db_context",
    "init_db",
    "close_db",
    # Security
    "verify_bearer_secret",
    "hash_url",
    # Cache
    "CacheBackend",
    "InMemoryCacheBackend",
    "RedisCacheBackend",
    "CitationCache",
    "build_citation_cache",
    "get_redis",
    "close_redis",
]
