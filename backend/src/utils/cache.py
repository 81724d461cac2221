"""Caching utilities for the ski conditions API."""

from functools import wraps
from typing import Callable

from cachetools import TTLCache

# Published snapshot changes only on ingestion, which clears the cache
CACHE_TTL_SECONDS = 300  # 5 minutes
SNAPSHOT_CACHE_KEY = "published"

_snapshot_cache: TTLCache = TTLCache(maxsize=1, ttl=CACHE_TTL_SECONDS)


def cached_snapshot(func: Callable) -> Callable:
    """Cache decorator for the published snapshot (5-minute TTL).

    The wrapped function takes no arguments: there is a single published
    document per deployment.
    """

    @wraps(func)
    def wrapper():
        if SNAPSHOT_CACHE_KEY in _snapshot_cache:
            return _snapshot_cache[SNAPSHOT_CACHE_KEY]
        result = func()
        _snapshot_cache[SNAPSHOT_CACHE_KEY] = result
        return result

    return wrapper


def clear_all_caches() -> None:
    """Clear all caches. Called after ingestion and in tests."""
    _snapshot_cache.clear()


# Cache-Control header values
CACHE_CONTROL_PUBLIC = "public, max-age=300"  # 5 minutes, cacheable by any cache
CACHE_CONTROL_NO_STORE = "no-store"
