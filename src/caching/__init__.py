"""
Expiring memoization cache with timed, non-owning eviction.
"""

from .scheduler import EvictionScheduler, monotonic_ms
from .expiring_cache import ExpiringCache, CacheEntry, DEFAULT_TTL_MS
from .memoize import cached_compute

__all__ = [
    'EvictionScheduler',
    'monotonic_ms',
    'ExpiringCache',
    'CacheEntry',
    'DEFAULT_TTL_MS',
    'cached_compute',
]
