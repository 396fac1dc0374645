"""Cache entry domain entity."""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntryEntity(Generic[T]):
    """Domain entity for a cached value.

    Entries are immutable. Reads that update access statistics publish a
    replacement entry instead of mutating the stored one.

    Attributes:
        key: Canonical cache key
        value: The cached value
        created_at: When this entry was written (seconds, store clock)
        ttl_ms: Time-to-live in milliseconds
        query: The original query text, kept for analytics
        filters: The original filters, kept for analytics
        access_count: Number of cache hits served by this entry
        last_accessed: Time of the last hit (seconds, store clock)
    """

    key: str
    value: T
    created_at: float
    ttl_ms: int
    query: str = ""
    filters: dict[str, Any] = field(default_factory=dict)
    access_count: int = 0
    last_accessed: float = 0.0

    def is_expired(self, now: float) -> bool:
        """An entry is valid only while now - created_at < ttl."""
        return (now - self.created_at) * 1000 >= self.ttl_ms
