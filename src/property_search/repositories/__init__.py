"""Repository layer for data access.

This layer abstracts storage (the in-process cache map, the property store)
behind protocol-based interfaces. This enables:
- Easy swapping of implementations (in-memory -> Redis, fixture -> database, etc.)
- Unit testing with isolated instances
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from property_search.protocols import CacheStore, PropertySource

from .memory_cache_store import InMemoryCacheStore
from .memory_property_repository import InMemoryPropertyRepository, property_from_dict

__all__ = [
    "CacheStore",
    "PropertySource",
    "InMemoryCacheStore",
    "InMemoryPropertyRepository",
    "property_from_dict",
]
