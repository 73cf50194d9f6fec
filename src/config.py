"""Runtime configuration for the neighborhood cache.

Defaults live in code; deployments override them through environment
variables (see ``.env.example``).
"""

import os
from typing import Callable, Mapping, Optional

from .caching.expiring_cache import ExpiringCache, DEFAULT_TTL_MS

TTL_ENV_VAR = "CA_CACHE_TTL_MS"
BACKGROUND_ENV_VAR = "CA_CACHE_BACKGROUND_EVICTION"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class CacheConfig:
    """Configuration for ExpiringCache instances."""

    def __init__(self,
                 default_ttl_ms: float = DEFAULT_TTL_MS,
                 background_eviction: bool = True):
        """Initialize cache configuration.

        Args:
            default_ttl_ms: Entry lifetime in milliseconds (must be positive)
            background_eviction: Run timed evictions on a background thread
        """
        if default_ttl_ms <= 0:
            raise ValueError("default_ttl_ms must be positive")
        self.default_ttl_ms = default_ttl_ms
        self.background_eviction = background_eviction

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'CacheConfig':
        """Build configuration from environment variables.

        Args:
            environ: Mapping to read from (``os.environ`` if None)

        Raises:
            ValueError: If a variable is set to an unparseable value
        """
        if environ is None:
            environ = os.environ

        ttl_text = environ.get(TTL_ENV_VAR, "").strip()
        if ttl_text:
            try:
                default_ttl_ms = float(ttl_text)
            except ValueError:
                raise ValueError(f"{TTL_ENV_VAR} must be a number, got {ttl_text!r}") from None
        else:
            default_ttl_ms = DEFAULT_TTL_MS

        background_text = environ.get(BACKGROUND_ENV_VAR, "").strip().lower()
        if not background_text:
            background_eviction = True
        elif background_text in _TRUE_VALUES:
            background_eviction = True
        elif background_text in _FALSE_VALUES:
            background_eviction = False
        else:
            raise ValueError(f"{BACKGROUND_ENV_VAR} must be a boolean, got {background_text!r}")

        return cls(default_ttl_ms=default_ttl_ms, background_eviction=background_eviction)

    def build_cache(self, clock: Optional[Callable[[], float]] = None) -> ExpiringCache:
        """Create a cache using this configuration."""
        return ExpiringCache(
            default_ttl_ms=self.default_ttl_ms,
            clock=clock,
            background=self.background_eviction
        )

    def copy(self) -> 'CacheConfig':
        """Create a copy of the configuration."""
        return CacheConfig(
            default_ttl_ms=self.default_ttl_ms,
            background_eviction=self.background_eviction
        )

    def __repr__(self) -> str:
        return (f"CacheConfig(default_ttl_ms={self.default_ttl_ms}, "
                f"background_eviction={self.background_eviction})")
