"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from property_search.services import PropertySearchService, SearchCacheService

    # Using factory methods (recommended)
    cache = SearchCacheService.create()
    search = PropertySearchService.create(source=repository, cache=cache)
    ```
"""

from .search_cache_service import SearchCacheService, make_cache_key
from .search_service import PropertySearchService

__all__ = [
    "PropertySearchService",
    "SearchCacheService",
    "make_cache_key",
]
