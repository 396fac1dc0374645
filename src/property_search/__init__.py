"""Property Search - fuzzy relevance ranking and search caching for listings.

This package provides a layered architecture for property search:

Layers:
    - matcher: Pure fuzzy scoring, ranking and suggestion functions
    - protocols: Interface contracts (CacheStore, PropertySource, SearchableRecord)
    - repositories: Data access implementations
    - services: Business logic (search cache, search orchestration)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from property_search import search_records, SearchCacheService

    cache = SearchCacheService.create()
    results = search_records("3 bhk mumbai", properties, threshold=0.4, max_results=10)
    cache.cache_search_results("3 bhk mumbai", {"bhk": 3}, results)
    ```

For HTTP API:
    ```python
    from property_search.api.app import app
    ```
"""

from property_search.config import get_settings, settings
from property_search.entities import (
    CacheEntryEntity,
    LocationRecord,
    MatchResult,
    PropertyConfiguration,
    PropertyRecord,
    QueryPerformanceSample,
    Suggestion,
)
from property_search.matcher import (
    REAL_ESTATE_DICTIONARY,
    auto_correct_query,
    generate_suggestions,
    match_record,
    score,
    search_records,
)
from property_search.protocols import CacheStore, PropertySource, SearchableRecord
from property_search.repositories import InMemoryCacheStore, InMemoryPropertyRepository, property_from_dict
from property_search.services import PropertySearchService, SearchCacheService

__all__ = [
    # Configuration
    "settings",
    "get_settings",
    # Matcher (pure functions)
    "score",
    "match_record",
    "search_records",
    "generate_suggestions",
    "auto_correct_query",
    "REAL_ESTATE_DICTIONARY",
    # Protocols (interfaces)
    "CacheStore",
    "PropertySource",
    "SearchableRecord",
    # Services (business logic)
    "SearchCacheService",
    "PropertySearchService",
    # Repositories (data access)
    "InMemoryCacheStore",
    "InMemoryPropertyRepository",
    "property_from_dict",
    # Entities (domain models)
    "CacheEntryEntity",
    "LocationRecord",
    "MatchResult",
    "PropertyConfiguration",
    "PropertyRecord",
    "QueryPerformanceSample",
    "Suggestion",
]
