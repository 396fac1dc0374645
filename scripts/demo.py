#!/usr/bin/env python3
"""
Demo script for property search.

This script demonstrates fuzzy ranking, the search result cache and
suggestions with misspelled real estate queries.
"""

import time

from property_search import (
    InMemoryPropertyRepository,
    PropertySearchService,
    SearchCacheService,
    property_from_dict,
    score,
)
from property_search.entities import LocationRecord

SAMPLE_PROPERTIES = [
    {
        "id": "p1",
        "title": "3 BHK Flat in Mumbai",
        "description": "Spacious flat close to the station",
        "location": "Andheri West",
        "property_type": "Apartment",
        "location_id": "loc-mum",
        "created_at": "2024-03-01T10:00:00Z",
        "property_configurations": [{"id": "c1", "bhk": 3, "price": 15000000}],
    },
    {
        "id": "p2",
        "title": "2 BHK Villa in Pune",
        "description": "Independent villa with garden",
        "location": "Baner",
        "property_type": "Villa",
        "location_id": "loc-pune",
        "created_at": "2024-02-01T10:00:00Z",
        "property_configurations": [{"id": "c2", "bhk": 2, "price": 9000000}],
    },
    {
        "id": "p3",
        "title": "3BHK Apartment Mumbai Central",
        "description": "Corner unit with city views",
        "location": "Mumbai Central",
        "property_type": "Apartment",
        "location_id": "loc-mum",
        "created_at": "2024-01-01T10:00:00Z",
        "property_configurations": [
            {"id": "c3", "bhk": 3, "price": 21000000},
            {"id": "c4", "bhk": 2, "price": 12000000},
        ],
    },
]

SAMPLE_LOCATIONS = [
    LocationRecord(id="loc-mum", name="Andheri West", description="Mumbai suburb"),
    LocationRecord(id="loc-pune", name="Baner", description="Pune"),
]


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def build_service() -> PropertySearchService:
    """Create a search service over the sample listings."""
    repository = InMemoryPropertyRepository(
        properties=[property_from_dict(item) for item in SAMPLE_PROPERTIES],
        locations=SAMPLE_LOCATIONS,
    )
    return PropertySearchService.create(source=repository, cache=SearchCacheService.create())


def demo_scoring() -> None:
    """Demonstrate field scoring."""
    print_section("Fuzzy Scoring")

    pairs = [
        ("Mumbai", "mumbai"),
        ("mumbai", "3 BHK Flat in Mumbai"),
        ("mumbai 3 bhk", "3 BHK Flat in Mumbai"),
        ("apartmnet", "Apartment"),
        ("munbai", "Pune"),
    ]

    print(f"\n{'Query':<16} {'Field':<26} {'Score':<8}")
    print("-" * 50)
    for query, field in pairs:
        print(f"{query:<16} {field:<26} {score(query, field):<8.3f}")


def demo_search_cache(service: PropertySearchService) -> None:
    """Demonstrate ranked search and cache hits."""
    print_section("Search and Cache")

    for query, bhk in [("3 bhk mumbai", None), ("3 BHK Mumbai ", None), ("mumbai", 2)]:
        outcome = service.search(query, bhk=bhk)
        status = "HIT" if outcome.cache_hit else "MISS"
        print(f"\n  Query: '{query}' bhk={bhk} -> {status} in {outcome.response_time_ms}ms")
        for match in outcome.results:
            print(f"    {match.score:.3f}  {match.record.title}  {list(match.matched_fields)}")


def demo_suggestions(service: PropertySearchService) -> None:
    """Demonstrate suggestions and auto-correction."""
    print_section("Suggestions")

    for query in ["munbai", "apartmnt", "vil"]:
        start = time.time()
        outcome = service.suggest(query, limit=5)
        duration = (time.time() - start) * 1000
        print(f"\n  Query: '{query}' (corrected: '{outcome.corrected_query}', {duration:.2f}ms)")
        for suggestion in outcome.suggestions:
            print(f"    [{suggestion.type}] {suggestion.text} ({suggestion.category})")


def demo_analytics(service: PropertySearchService) -> None:
    """Demonstrate analytics over the cached searches."""
    print_section("Analytics")

    report = service.analytics(limit=5)
    metrics = report["performance_metrics"]

    print(f"\n  Total queries: {metrics['total_queries']}")
    print(f"  Hit rate: {metrics['hit_rate']:.2%}")
    print(f"  Avg response time: {metrics['average_response_time_ms']:.2f}ms")
    print("\n  Popular searches:")
    for item in report["popular_searches"]:
        print(f"    {item['query']!r} ({item['access_count']} hits)")
    print(f"\n  Trends: {report['search_trends']}")


def main() -> None:
    """Run all demos."""
    print("\n🚀 Property Search Demo")
    print("=" * 70)
    print("This demo showcases typo-tolerant property search with caching")

    service = build_service()
    demo_scoring()
    demo_search_cache(service)
    demo_suggestions(service)
    demo_analytics(service)

    print("\n" + "=" * 70)
    print("✅ Demo completed successfully!")
    print("=" * 70)


if __name__ == "__main__":
    main()
