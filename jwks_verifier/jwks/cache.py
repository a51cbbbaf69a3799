"""
TTL-bounded key-set cache.

Maps a key-set location to the most recently fetched ``Jwks`` together with
its fetch time. All access to the mapping is serialized through a single
lock per cache instance. Entries are immutable and replaced as a whole.

Fetch-and-store is not atomic across callers: two verifications missing on
the same location may both fetch, and the later ``put`` wins.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..clock import current_time
from ..config import get_settings
from ..logging import get_logger
from .models import Jwks


@dataclass(frozen=True)
class _CacheEntry:
    jwks: Jwks
    fetched_at: int


class JwksCache:
    """Cache of key-set documents keyed by location."""

    def __init__(self, ttl_seconds: int, clock: Callable[[], int] = current_time) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, _CacheEntry] = {}
        self._lock = threading.Lock()
        self.logger = get_logger("jwks_verifier.cache")

    def put(self, location: str, jwks: Jwks) -> None:
        """Store *jwks* for *location*, stamped with the current time."""
        entry = _CacheEntry(jwks=jwks, fetched_at=self._clock())
        with self._lock:
            self._entries[location] = entry

    def get_fresh(self, location: str) -> Optional[Jwks]:
        """Return the cached key set if its age is within the TTL."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(location)
        if entry is None:
            self.logger.debug("JWKS cache miss", location=location)
            return None
        if now - entry.fetched_at > self.ttl_seconds:
            self.logger.debug(
                "JWKS cache entry stale",
                location=location,
                age=now - entry.fetched_at,
                ttl=self.ttl_seconds
            )
            return None
        self.logger.debug("JWKS cache hit", location=location)
        return entry.jwks

    def invalidate(self, location: str) -> None:
        """Drop the entry for *location*, if any."""
        with self._lock:
            self._entries.pop(location, None)

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            self._entries.clear()
        self.logger.info("JWKS cache cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_default_cache: Optional[JwksCache] = None
_default_cache_lock = threading.Lock()


def get_default_cache() -> JwksCache:
    """Return the process-wide cache, creating it on first use."""
    global _default_cache
    if _default_cache is None:
        with _default_cache_lock:
            if _default_cache is None:
                _default_cache = JwksCache(ttl_seconds=get_settings().cache_ttl_seconds)
    return _default_cache


def reset_default_cache() -> None:
    """Discard the process-wide cache; the next use creates a new one."""
    global _default_cache
    with _default_cache_lock:
        _default_cache = None
