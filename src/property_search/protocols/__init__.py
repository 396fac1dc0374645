"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (in-memory -> Redis, fixture -> database, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from property_search.protocols import CacheStore, PropertySource

    store: CacheStore = InMemoryCacheStore(default_ttl_ms=300_000)
    source: PropertySource = InMemoryPropertyRepository(properties=[...])
    ```
"""

from .cache_store import CacheStore
from .property_source import PropertySource
from .searchable_record import SearchableRecord

__all__ = [
    "CacheStore",
    "PropertySource",
    "SearchableRecord",
]
