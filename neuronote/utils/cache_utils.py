"""
Caching utilities using diskcache
"""
from diskcache import Cache
from typing import Any, Optional
import hashlib
from config import settings

# Initialize cache
cache = Cache(str(settings.CACHE_DIR))


def get_cache_key(prefix: str, *parts: str) -> str:
    """Generate a cache key from a prefix and string parts"""
    digest = hashlib.sha256()
    for part in parts:
        digest.update(part.encode("utf-8"))
        digest.update(b"\x00")
    return f"{prefix}:{digest.hexdigest()}"


def get_cached(key: str) -> Optional[Any]:
    """Return a cached value or None"""
    return cache.get(key)


def set_cached(key: str, value: Any, ttl: int) -> None:
    """Store a value for ``ttl`` seconds"""
    cache.set(key, value, expire=ttl)
