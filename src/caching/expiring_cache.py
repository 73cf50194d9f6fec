"""Expiring memoization cache for per-cell neighborhood results.

Entries live for a fixed time-to-live and are then removed by the eviction
scheduler, even if nobody reads them again. Reads after expiry but before
the scheduled eviction behave exactly like misses.

Keys are held without extending the lifetime of what they identify:
keys compared by identity (grid objects, mutable regions) are stored in a
``WeakKeyDictionary`` and the eviction queue only keeps a weak reference
to them. Keys compared by value (ints, strings, coordinate tuples,
frozensets, frozen dataclasses) are plain values and are stored as-is, so
an equal key built later still finds the entry.
"""

import itertools
import threading
import weakref
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, MutableMapping, Optional, TypeVar
import logging

from .scheduler import EvictionScheduler

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")

DEFAULT_TTL_MS = 60000  # one minute


@dataclass
class CacheEntry(Generic[V]):
    """A cached value with its absolute expiry time."""
    value: V
    expiry: float       # Cache clock milliseconds
    generation: int     # Identifies the eviction scheduled for this entry


class ExpiringCache(Generic[K, V]):
    """Key-value cache with per-entry TTL and timed eviction.

    The cache is a best-effort optimization: it never raises on a miss, and
    callers must recompute and ``set`` again whenever ``get`` comes back
    empty. An eviction may run between two reads, so a hit says nothing
    about the next read.
    """

    def __init__(self,
                 default_ttl_ms: float = DEFAULT_TTL_MS,
                 clock: Optional[Callable[[], float]] = None,
                 scheduler: Optional[EvictionScheduler] = None,
                 background: bool = True):
        """Initialize cache.

        Args:
            default_ttl_ms: TTL used when ``set`` is called without one
            clock: Millisecond clock (the scheduler's clock if None)
            scheduler: Eviction scheduler owned by this cache (created if None)
            background: Start the scheduler's background loop. When False,
                evictions only happen through ``run_pending``.
        """
        if default_ttl_ms <= 0:
            raise ValueError("default_ttl_ms must be positive")

        self.default_ttl_ms = default_ttl_ms
        owns_scheduler = scheduler is None
        self.scheduler = scheduler or EvictionScheduler(clock)
        self.clock = clock or self.scheduler.clock

        self._weak_entries: MutableMapping[Any, CacheEntry[V]] = weakref.WeakKeyDictionary()
        self._entries: Dict[Any, CacheEntry[V]] = {}
        self._lock = threading.RLock()
        self._generations = itertools.count()
        # Bumped by clear() so evictions scheduled earlier become no-ops
        self._epoch = 0

        # Performance tracking
        self.hits = 0
        self.misses = 0
        self.expirations = 0
        self.evictions = 0

        if owns_scheduler:
            # Owned loop stops when the cache is collected without close()
            weakref.finalize(self, self.scheduler.stop)

        if background:
            self.scheduler.start()

    def _store_for(self, key: Any) -> MutableMapping[Any, CacheEntry[V]]:
        if type(key).__hash__ is not object.__hash__:
            return self._entries
        try:
            weakref.ref(key)
        except TypeError:
            return self._entries
        return self._weak_entries

    def set(self, key: K, value: V, ttl_ms: Optional[float] = None) -> None:
        """Store a value and schedule its eviction.

        Re-setting a key replaces its value; the eviction scheduled by the
        earlier ``set`` still fires but leaves the newer entry alone.

        Args:
            key: Identity of the cached computation
            value: Result to cache
            ttl_ms: Time-to-live in milliseconds (default_ttl_ms if None)
        """
        ttl = self.default_ttl_ms if ttl_ms is None else ttl_ms
        if ttl <= 0:
            raise ValueError("ttl_ms must be positive")

        now = self.clock()
        store = self._store_for(key)
        if store is self._weak_entries:
            key_ref = weakref.ref(key)
        else:
            def key_ref():
                return key

        # Entry and its eviction are published together with respect to clear()
        with self._lock:
            generation = next(self._generations)
            expiry = now + ttl
            store[key] = CacheEntry(value, expiry, generation)
            self.scheduler.schedule(expiry, self._eviction_callback(key_ref, generation, self._epoch))

        logger.debug(f"Cached {key!r} for {ttl}ms (generation {generation})")

    def _eviction_callback(self, key_ref: Callable[[], Any], generation: int, epoch: int) -> Callable[[], None]:
        cache_ref = weakref.ref(self)

        def evict() -> None:
            cache = cache_ref()
            if cache is not None:
                cache._evict(key_ref, generation, epoch)

        return evict

    def _evict(self, key_ref: Callable[[], Any], generation: int, epoch: int) -> None:
        key = key_ref()
        if key is None:
            # Subject was collected; the weak store already dropped its entry
            return

        store = self._store_for(key)
        with self._lock:
            if epoch != self._epoch:
                return
            entry = store.get(key)
            if entry is None or entry.generation != generation:
                return
            del store[key]
            self.evictions += 1

        logger.debug(f"Evicted {key!r} (generation {generation})")

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Retrieve a cached value.

        Args:
            key: Identity of the cached computation
            default: Returned on a miss

        Returns:
            Cached value, or ``default`` if absent or expired
        """
        store = self._store_for(key)
        now = self.clock()
        with self._lock:
            entry = store.get(key)
            if entry is None:
                self.misses += 1
                return default

            if now > entry.expiry:
                # Lazy expiry; the pending eviction will find nothing to do
                del store[key]
                self.expirations += 1
                self.misses += 1
                logger.debug(f"Cache expiration for {key!r}")
                return default

            self.hits += 1
            return entry.value

    def contains(self, key: K) -> bool:
        """Check for a live entry without touching statistics."""
        store = self._store_for(key)
        now = self.clock()
        with self._lock:
            entry = store.get(key)
            return entry is not None and now <= entry.expiry

    def __contains__(self, key: K) -> bool:
        return self.contains(key)

    def clear(self) -> None:
        """Drop every entry and cancel all pending evictions."""
        with self._lock:
            self._epoch += 1
            self._weak_entries.clear()
            self._entries.clear()
            self.hits = 0
            self.misses = 0
            self.expirations = 0
            self.evictions = 0
            cancelled = self.scheduler.cancel_all()
        logger.info(f"Cache cleared ({cancelled} pending evictions cancelled)")

    def run_pending(self) -> int:
        """Run evictions that are due now.

        Returns:
            Number of scheduled evictions processed
        """
        return self.scheduler.run_pending(self.clock())

    def close(self) -> None:
        """Stop the background eviction loop."""
        self.scheduler.stop()

    def __enter__(self) -> 'ExpiringCache[K, V]':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def size(self) -> int:
        """Stored entries, including expired ones not yet evicted."""
        with self._lock:
            return len(self._weak_entries) + len(self._entries)

    def __len__(self) -> int:
        return self.size

    @property
    def hit_rate(self) -> float:
        """Cache hit rate (0.0 to 1.0)."""
        total_accesses = self.hits + self.misses
        if total_accesses == 0:
            return 0.0
        return self.hits / total_accesses

    def get_stats(self) -> Dict[str, float]:
        """Get cache statistics."""
        return {
            'size': self.size,
            'pending_evictions': self.scheduler.pending,
            'hit_rate': self.hit_rate,
            'hits': self.hits,
            'misses': self.misses,
            'expirations': self.expirations,
            'evictions': self.evictions
        }

    def __repr__(self) -> str:
        return (f"ExpiringCache(size={self.size}, default_ttl_ms={self.default_ttl_ms}, "
                f"hit_rate={self.hit_rate:.2f})")
