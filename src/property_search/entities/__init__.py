"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by the matcher,
services and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- No external dependencies
"""

from .cache_entry import CacheEntryEntity
from .match_result import MatchResult, Suggestion, SuggestionType
from .performance_sample import QueryPerformanceSample
from .property import (
    DEFAULT_FIELD_WEIGHTS,
    LocationRecord,
    PropertyConfiguration,
    PropertyRecord,
)

__all__ = [
    "CacheEntryEntity",
    "DEFAULT_FIELD_WEIGHTS",
    "LocationRecord",
    "MatchResult",
    "PropertyConfiguration",
    "PropertyRecord",
    "QueryPerformanceSample",
    "Suggestion",
    "SuggestionType",
]
