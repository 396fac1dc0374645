"""Cache storage protocol.

Defines the interface for a key -> entry store with per-entry TTL.

Implementations can include:
- In-process ordered dict guarded by a lock (default)
- Redis or memcached for a cache shared between workers
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from property_search.entities.cache_entry import CacheEntryEntity


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Writes must be atomic per key: a reader never observes a half-written
    entry. Expired entries must read as absent.
    """

    def get(self, key: str) -> Any | None:
        """Return the live value for key, or None when absent or expired.

        Args:
            key: Canonical cache key

        Returns:
            The cached value, or None
        """
        ...

    def set(
        self,
        key: str,
        value: Any,
        ttl_ms: int | None = None,
        query: str = "",
        filters: dict[str, Any] | None = None,
    ) -> None:
        """Store or replace an entry, resetting its expiry.

        Args:
            key: Canonical cache key
            value: The value to cache
            ttl_ms: Time-to-live in milliseconds. Defaults to the store default.
            query: Original query text (analytics only)
            filters: Original filters (analytics only)
        """
        ...

    def delete(self, key: str) -> bool:
        """Delete an entry.

        Args:
            key: Canonical cache key

        Returns:
            True if an entry was removed, False otherwise
        """
        ...

    def delete_where(self, predicate: Callable[[CacheEntryEntity], bool]) -> int:
        """Delete every entry matching a predicate.

        Args:
            predicate: Called with each stored entry

        Returns:
            Number of entries deleted
        """
        ...

    def clear(self) -> int:
        """Remove every entry and reset statistics.

        Returns:
            Number of entries removed
        """
        ...

    def sweep_expired(self) -> int:
        """Remove every expired entry.

        Returns:
            Number of entries removed
        """
        ...

    def entries(self) -> list[CacheEntryEntity]:
        """Return a snapshot of live entries.

        Returns:
            List of entries that have not expired
        """
        ...

    def get_stats(self) -> dict:
        """Get store statistics.

        Returns:
            Dictionary with hits, misses, size and hit rate
        """
        ...
