"""Compute-through helper for ExpiringCache."""

from typing import Callable, Optional, TypeVar
import logging

from .expiring_cache import ExpiringCache

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


def cached_compute(cache: ExpiringCache[K, V],
                   key: K,
                   compute: Callable[[], V],
                   ttl_ms: Optional[float] = None) -> V:
    """Return the cached result for ``key`` or compute and cache it.

    Args:
        cache: Cache instance to use
        key: Identity of the computation's input
        compute: Pure function producing the value on a miss
        ttl_ms: TTL for a newly cached value (cache default if None)

    Returns:
        Value (from cache if available, computed otherwise)
    """
    cached_value = cache.get(key)
    if cached_value is not None:
        return cached_value

    value = compute()
    # None is indistinguishable from a miss, so it is never stored
    if value is not None:
        cache.set(key, value, ttl_ms)
    else:
        logger.debug(f"Not caching None result for {key!r}")

    return value
