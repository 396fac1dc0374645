"""In-process implementation of CacheStore.

Keeps entries in an OrderedDict guarded by a re-entrant lock, so request
handlers running in a thread pool never observe a half-written entry.
It's the default implementation and satisfies the CacheStore protocol.
"""

import dataclasses
import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

from property_search.entities import CacheEntryEntity

logger = logging.getLogger(__name__)


class InMemoryCacheStore:
    """TTL cache with least-recently-used eviction.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Features:
    - Per-entry TTL, expired entries read as absent and are dropped lazily
    - Opportunistic sweep of expired entries once per cleanup interval
    - LRU eviction when max_size is reached
    - Hit/miss statistics
    """

    def __init__(
        self,
        default_ttl_ms: int,
        max_size: int = 1000,
        cleanup_interval_ms: int = 60_000,
        clock: Callable[[], float] | None = None,
        name: str = "cache",
    ) -> None:
        """Initialize the store.

        Args:
            default_ttl_ms: TTL applied when set() gets no explicit TTL.
            max_size: Maximum number of entries before LRU eviction.
            cleanup_interval_ms: Minimum time between opportunistic sweeps.
            clock: Time source in seconds. Defaults to time.time.
            name: Label used in logs and statistics.
        """
        if default_ttl_ms < 0:
            raise ValueError("default_ttl_ms must not be negative")
        if max_size < 1:
            raise ValueError("max_size must be at least 1")

        self.name = name
        self.default_ttl_ms = default_ttl_ms
        self.max_size = max_size
        self.cleanup_interval_ms = cleanup_interval_ms
        self._clock = clock or time.time
        self._entries: OrderedDict[str, CacheEntryEntity] = OrderedDict()
        self._lock = threading.RLock()
        self._last_sweep = self._clock()

        # Stats
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Any | None:
        """Return the live value for key, or None when absent or expired."""
        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)

            if entry is None:
                self.misses += 1
                return None

            if entry.is_expired(now):
                del self._entries[key]
                self.misses += 1
                logger.debug("[%s] expired entry dropped: %s", self.name, key)
                return None

            self._entries[key] = dataclasses.replace(
                entry,
                access_count=entry.access_count + 1,
                last_accessed=now,
            )
            self._entries.move_to_end(key)
            self.hits += 1
            return entry.value

    def set(
        self,
        key: str,
        value: Any,
        ttl_ms: int | None = None,
        query: str = "",
        filters: dict[str, Any] | None = None,
    ) -> None:
        """Store or replace an entry, resetting its expiry."""
        ttl = self.default_ttl_ms if ttl_ms is None else ttl_ms
        if ttl < 0:
            raise ValueError(f"ttl_ms must not be negative, got {ttl}")

        with self._lock:
            now = self._clock()
            self._maybe_sweep(now)

            self._entries.pop(key, None)
            # Evict least recently used if at capacity
            while len(self._entries) >= self.max_size:
                evicted_key, _ = self._entries.popitem(last=False)
                logger.debug("[%s] evicted LRU entry: %s", self.name, evicted_key)

            self._entries[key] = CacheEntryEntity(
                key=key,
                value=value,
                created_at=now,
                ttl_ms=ttl,
                query=query,
                filters=dict(filters or {}),
                last_accessed=now,
            )

    def delete(self, key: str) -> bool:
        """Delete an entry. Returns True if one was removed."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def delete_where(self, predicate: Callable[[CacheEntryEntity], bool]) -> int:
        """Delete every entry matching predicate. Returns count removed."""
        with self._lock:
            doomed = [key for key, entry in self._entries.items() if predicate(entry)]
            for key in doomed:
                del self._entries[key]
            return len(doomed)

    def clear(self) -> int:
        """Clear all entries and reset statistics."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self.hits = 0
            self.misses = 0
            return count

    def sweep_expired(self) -> int:
        """Remove all expired entries. Returns count of removed entries."""
        with self._lock:
            now = self._clock()
            self._last_sweep = now
            removed = self.delete_where(lambda entry: entry.is_expired(now))
            if removed:
                logger.debug("[%s] swept %d expired entries", self.name, removed)
            return removed

    def _maybe_sweep(self, now: float) -> None:
        if (now - self._last_sweep) * 1000 >= self.cleanup_interval_ms:
            self.sweep_expired()

    def entries(self) -> list[CacheEntryEntity]:
        """Snapshot of live entries, least recently used first."""
        with self._lock:
            now = self._clock()
            return [entry for entry in self._entries.values() if not entry.is_expired(now)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> dict:
        """Get store statistics."""
        with self._lock:
            total = self.hits + self.misses
            return {
                "name": self.name,
                "hits": self.hits,
                "misses": self.misses,
                "size": len(self._entries),
                "max_size": self.max_size,
                "hit_rate": self.hits / total if total else 0.0,
                "default_ttl_ms": self.default_ttl_ms,
            }
