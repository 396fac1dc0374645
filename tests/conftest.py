"""
Shared fixtures for the property search tests.
"""

from pathlib import Path

import pytest

from property_search.config import Settings
from property_search.repositories import InMemoryPropertyRepository
from property_search.services import PropertySearchService, SearchCacheService

DATA_FILE = Path(__file__).parent / "data" / "properties.json"


class FakeClock:
    """Manually advanced time source (seconds)."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000


class CountingSource:
    """Wraps a property source and counts candidate fetches."""

    def __init__(self, source: InMemoryPropertyRepository) -> None:
        self._source = source
        self.fetches = 0

    def fetch_active_properties(self, location_id=None):
        self.fetches += 1
        return self._source.fetch_active_properties(location_id=location_id)

    def fetch_active_locations(self):
        return self._source.fetch_active_locations()

    def health_check(self):
        return self._source.health_check()


@pytest.fixture
def clock():
    """A fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def test_settings():
    """Settings with small, predictable cache sizes."""
    return Settings(
        search_cache_ttl_ms=300_000,
        search_cache_max_size=50,
        suggestion_cache_ttl_ms=1_800_000,
        suggestion_cache_max_size=20,
        cache_cleanup_interval_ms=60_000,
        performance_max_samples=100,
        search_fuzzy_threshold=0.4,
        suggestion_fuzzy_threshold=0.6,
    )


@pytest.fixture
def repository():
    """Property repository loaded from the JSON fixture."""
    return InMemoryPropertyRepository.from_json_file(DATA_FILE)


@pytest.fixture
def counting_source(repository):
    """Repository wrapper counting candidate fetches."""
    return CountingSource(repository)


@pytest.fixture
def cache_service(test_settings, clock):
    """Isolated cache service on a fake clock."""
    return SearchCacheService.create(settings=test_settings, clock=clock)


@pytest.fixture
def search_service(counting_source, cache_service, test_settings):
    """Search service over the fixture data."""
    return PropertySearchService.create(
        source=counting_source,
        cache=cache_service,
        settings=test_settings,
    )
