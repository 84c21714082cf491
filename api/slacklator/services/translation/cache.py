"""Bounded in-memory TTL cache for translations and detection results.

Keys are plain strings built by the helpers below:
- translations: "<text[:100]>:<target>:<source or auto>"
- detections:   "detect:<text[:50]>"
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

from cachetools import TLRUCache  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

V = TypeVar("V")

TRANSLATION_KEY_CHARS = 100
DETECTION_KEY_CHARS = 50


def make_translation_key(
    text: str, target_lang: str, source_lang: Optional[str] = None
) -> str:
    """Build the cache key for a translation request."""
    return f"{text[:TRANSLATION_KEY_CHARS]}:{target_lang}:{source_lang or 'auto'}"


def make_detection_key(text: str) -> str:
    """Build the cache key for a language detection result."""
    return f"detect:{text[:DETECTION_KEY_CHARS]}"


@dataclass
class CacheEntry(Generic[V]):
    """A cached value and the clock reading after which it is dead."""

    value: V
    expires_at: float


def _entry_expiry(_key: str, entry: CacheEntry, _now: float) -> float:
    return entry.expires_at


class _EvictionCountingCache(TLRUCache):
    """TLRUCache that counts capacity evictions.

    Expired entries are dropped by expire() and never reach popitem().
    """

    evictions = 0

    def popitem(self) -> Tuple[str, CacheEntry]:
        item = super().popitem()
        self.evictions += 1
        return item


class TranslationCache(Generic[V]):
    """In-memory cache with per-entry TTL and a hard size bound.

    Storage is a cachetools TLRUCache: every entry carries its own expiry,
    and when full the least recently used live entry is evicted. Expired
    entries count as misses and are purged on access. All access is
    serialized by a single lock, so the cache can be shared by concurrent
    requests.
    """

    DEFAULT_TTL = 3600  # 1 hour in seconds

    def __init__(
        self,
        maxsize: int = 10000,
        default_ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
        name: str = "translations",
    ):
        """Initialize the cache.

        Args:
            maxsize: Maximum number of live entries.
            default_ttl: Lifetime in seconds used when set() gets no ttl.
            clock: Time source, injectable for tests.
            name: Label used in log messages.
        """
        if maxsize <= 0:
            raise ValueError(f"maxsize must be positive, got {maxsize}")
        self._cache = _EvictionCountingCache(
            maxsize=maxsize, ttu=_entry_expiry, timer=clock
        )
        self._lock = threading.RLock()
        self._clock = clock
        self.maxsize = maxsize
        self.default_ttl = default_ttl
        self.name = name
        self.hits = 0
        self.misses = 0

    @property
    def evictions(self) -> int:
        return self._cache.evictions

    def get(self, key: str) -> Optional[V]:
        """Get a live value from the cache.

        Args:
            key: Cache key to look up.

        Returns:
            Cached value if present and not expired, None otherwise.
        """
        with self._lock:
            expired = self._cache.expire()
            if expired:
                logger.debug(f"[{self.name}] expired {len(expired)} entries")
            entry = self._cache.get(key)
            if entry is None:
                self.misses += 1
                return None
            self.hits += 1
            return entry.value

    def set(self, key: str, value: V, ttl: Optional[float] = None) -> None:
        """Store a value, replacing any previous value and lifetime for the key.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Lifetime in seconds (default: the cache's default_ttl).
        """
        lifetime = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._cache[key] = CacheEntry(
                value=value, expires_at=self._clock() + lifetime
            )

    def delete(self, key: str) -> bool:
        with self._lock:
            self._cache.expire()
            return self._cache.pop(key, None) is not None

    def expires_at(self, key: str) -> Optional[float]:
        """Return the clock reading at which the key expires, if it is cached."""
        with self._lock:
            entry = self._cache.get(key)
            return entry.expires_at if entry is not None else None

    def cleanup_expired(self) -> int:
        """Remove expired entries from the cache.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            before = len(self._cache)
            self._cache.expire()
            return before - len(self._cache)

    def clear(self) -> None:
        """Clear all entries and statistics."""
        with self._lock:
            self._cache.clear()
            self._cache.evictions = 0
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._cache

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dict with hits, misses, evictions, size, maxsize and hit_ratio.
        """
        with self._lock:
            total = self.hits + self.misses
            return {
                "hits": self.hits,
                "misses": self.misses,
                "evictions": self._cache.evictions,
                "size": len(self._cache),
                "maxsize": self.maxsize,
                "hit_ratio": self.hits / total if total > 0 else 0,
            }
