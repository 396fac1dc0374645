"""
Tests for SearchCacheService: keys, TTLs, performance log and invalidation.
"""

import math
import time

import pytest

from property_search.entities import MatchResult, PropertyRecord
from property_search.services import SearchCacheService, make_cache_key


def result(record_id: str, score: float = 0.9) -> MatchResult:
    return MatchResult(record=PropertyRecord(id=record_id, title=f"Property {record_id}"), score=score)


class TestCacheKey:
    def test_filter_order_does_not_matter(self):
        assert make_cache_key("flat", {"bhk": 2, "location": "loc-mum"}) == make_cache_key(
            "flat", {"location": "loc-mum", "bhk": 2}
        )

    def test_query_case_and_whitespace_do_not_matter(self):
        assert make_cache_key("  3 BHK   Mumbai ") == make_cache_key("3 bhk mumbai")

    def test_unset_filters_are_dropped(self):
        assert make_cache_key("flat", {"bhk": None, "location": "loc-mum"}) == make_cache_key(
            "flat", {"location": "loc-mum"}
        )
        assert make_cache_key("flat", {}) == make_cache_key("flat", None)

    def test_different_filters_differ(self):
        assert make_cache_key("flat", {"bhk": 2}) != make_cache_key("flat", {"bhk": 3})

    def test_punctuation_is_significant(self):
        assert make_cache_key("flat!") != make_cache_key("flat")

    def test_non_string_query_raises(self):
        with pytest.raises(TypeError):
            make_cache_key(None)

    def test_mixed_filter_key_types(self):
        assert make_cache_key("flat", {1: "a", "b": 2}) == make_cache_key("flat", {"b": 2, 1: "a"})


class TestSearchResults:
    def test_ttl_with_real_clock(self, test_settings):
        cache = SearchCacheService.create(settings=test_settings)
        results = [result("p1")]

        cache.cache_search_results("flat", {"bhk": 2}, results, ttl_ms=100)
        assert cache.get_cached_search_results("flat", {"bhk": 2}) == results

        time.sleep(0.15)
        assert cache.get_cached_search_results("flat", {"bhk": 2}) is None

    def test_hit_with_equivalent_key(self, cache_service):
        results = [result("p1"), result("p2", 0.5)]
        cache_service.cache_search_results("3 BHK Mumbai", {"location": "loc-mum", "bhk": 3}, results)

        cached = cache_service.get_cached_search_results(" 3 bhk mumbai", {"bhk": 3, "location": "loc-mum"})

        assert [r.record.id for r in cached] == ["p1", "p2"]

    def test_overwrite_replaces(self, cache_service):
        cache_service.cache_search_results("flat", None, [result("p1")])
        cache_service.cache_search_results("flat", None, [result("p2")])

        assert [r.record.id for r in cache_service.get_cached_search_results("flat")] == ["p2"]

    def test_default_ttl(self, cache_service, clock):
        cache_service.cache_search_results("flat", None, [result("p1")])

        clock.advance_ms(cache_service.search_ttl_ms - 1)
        assert cache_service.get_cached_search_results("flat") is not None

        clock.advance_ms(2)
        assert cache_service.get_cached_search_results("flat") is None

    def test_returned_results_are_copies(self, cache_service):
        cache_service.cache_search_results("flat", {"bhk": 2}, [result("p1")])

        cache_service.get_cached_search_results("flat", {"bhk": 2}).clear()

        assert [r.record.id for r in cache_service.get_cached_search_results("flat", {"bhk": 2})] == ["p1"]

    def test_caller_list_is_not_shared(self, cache_service):
        results = [result("p1")]
        cache_service.cache_search_results("flat", None, results)

        results.append(result("p2"))

        assert len(cache_service.get_cached_search_results("flat")) == 1

    def test_empty_results_are_cached(self, cache_service):
        cache_service.cache_search_results("castle", None, [])

        assert cache_service.get_cached_search_results("castle") == []

    def test_negative_ttl_raises(self, cache_service):
        with pytest.raises(ValueError):
            cache_service.cache_search_results("flat", None, [], ttl_ms=-5)

    def test_instances_are_isolated(self, test_settings, clock):
        first = SearchCacheService.create(settings=test_settings, clock=clock)
        second = SearchCacheService.create(settings=test_settings, clock=clock)

        first.cache_search_results("flat", None, [result("p1")])

        assert second.get_cached_search_results("flat") is None


class TestSuggestions:
    def test_round_trip(self, cache_service):
        cache_service.cache_suggestions("mum", ["Mumbai", "Mumbai Central"])

        assert cache_service.get_cached_suggestions("MUM ") == ["Mumbai", "Mumbai Central"]

    def test_suggestion_ttl(self, cache_service, clock):
        cache_service.cache_suggestions("mum", ["Mumbai"])

        clock.advance_ms(cache_service.search_ttl_ms + 1)
        assert cache_service.get_cached_suggestions("mum") == ["Mumbai"]

        clock.advance_ms(cache_service.suggestion_ttl_ms)
        assert cache_service.get_cached_suggestions("mum") is None

    def test_returned_suggestions_are_copies(self, cache_service):
        cache_service.cache_suggestions("mum", ["Mumbai"])

        cache_service.get_cached_suggestions("mum").append("Pune")

        assert cache_service.get_cached_suggestions("mum") == ["Mumbai"]

    def test_separate_from_search_results(self, cache_service):
        cache_service.cache_suggestions("mum", ["Mumbai"])

        assert cache_service.get_cached_search_results("mum") is None


class TestPerformance:
    def test_records_samples(self, cache_service):
        cache_service.record_query_performance("flat", 10)
        cache_service.record_query_performance("villa", 30)

        summary = cache_service.performance_summary()

        assert summary["total_queries"] == 2
        assert summary["avg_response_time_ms"] == 20.0
        assert summary["window_max_response_time_ms"] == 30
        assert summary["last_query"] == "villa"

    def test_window_is_bounded(self, cache_service, test_settings):
        for i in range(test_settings.performance_max_samples + 25):
            cache_service.record_query_performance(f"q{i}", 1)

        summary = cache_service.performance_summary()

        assert summary["window_size"] == test_settings.performance_max_samples
        assert summary["total_queries"] == test_settings.performance_max_samples + 25

    @pytest.mark.parametrize("bad", [-1, "fast", None, True, math.nan, math.inf, -math.inf])
    def test_invalid_samples_are_dropped(self, cache_service, bad):
        cache_service.record_query_performance("flat", bad)

        assert cache_service.performance_summary()["total_queries"] == 0

    def test_stats_include_performance(self, cache_service):
        cache_service.cache_search_results("flat", None, [result("p1")])
        cache_service.get_cached_search_results("flat")
        cache_service.get_cached_search_results("villa")
        cache_service.record_query_performance("flat", 40)

        stats = cache_service.get_cache_stats()

        assert stats["search"]["hits"] == 1
        assert stats["search"]["misses"] == 1
        assert stats["search"]["size"] == 1
        assert stats["search"]["total_queries"] == 1
        assert stats["search"]["average_response_time_ms"] == 40.0
        assert stats["suggestions"]["size"] == 0


class TestPopularAndRecent:
    def test_popular_ordered_by_hits(self, cache_service):
        cache_service.cache_search_results("flat", None, [])
        cache_service.cache_search_results("villa", {"bhk": 3}, [])
        for _ in range(3):
            cache_service.get_cached_search_results("villa", {"bhk": 3})
        cache_service.get_cached_search_results("flat")

        popular = cache_service.get_popular_searches(limit=5)

        assert [p["query"] for p in popular] == ["villa", "flat"]
        assert popular[0]["access_count"] == 3
        assert popular[0]["filters"] == {"bhk": 3}

    def test_recent_ordered_newest_first(self, cache_service, clock):
        cache_service.cache_search_results("first", None, [])
        clock.advance_ms(10)
        cache_service.cache_search_results("second", None, [])

        recent = cache_service.get_recent_searches(limit=1)

        assert [r["query"] for r in recent] == ["second"]
        assert recent[0]["timestamp"] == clock.now

    def test_returned_filters_are_copies(self, cache_service):
        cache_service.cache_search_results("villa", {"bhk": 3}, [])

        cache_service.get_popular_searches()[0]["filters"]["bhk"] = 99
        cache_service.get_recent_searches()[0]["filters"]["bhk"] = 99

        assert cache_service.get_popular_searches()[0]["filters"] == {"bhk": 3}
        assert cache_service.get_recent_searches()[0]["filters"] == {"bhk": 3}

    def test_expired_entries_are_excluded(self, cache_service, clock):
        cache_service.cache_search_results("flat", None, [], ttl_ms=10)
        clock.advance_ms(20)

        assert cache_service.get_popular_searches() == []
        assert cache_service.get_recent_searches() == []


class TestInvalidation:
    def test_invalidate_query(self, cache_service):
        cache_service.cache_search_results("flat", {"bhk": 2}, [])
        cache_service.cache_suggestions("flat", ["Flat"])

        assert cache_service.invalidate_query("FLAT", {"bhk": 2}) is True
        assert cache_service.get_cached_search_results("flat", {"bhk": 2}) is None
        assert cache_service.get_cached_suggestions("flat") is None
        assert cache_service.invalidate_query("flat", {"bhk": 2}) is False

    def test_invalidate_pattern(self, cache_service):
        cache_service.cache_search_results("flat in mumbai", None, [])
        cache_service.cache_search_results("villa mumbai", {"bhk": 4}, [])
        cache_service.cache_search_results("pune villa", None, [])

        assert cache_service.invalidate_pattern("mumbai") == 2
        assert cache_service.get_cached_search_results("pune villa") == []

    def test_invalid_pattern_raises(self, cache_service):
        import re

        with pytest.raises(re.error):
            cache_service.invalidate_pattern("(")

    def test_sweep_expired(self, cache_service, clock):
        cache_service.cache_search_results("flat", None, [], ttl_ms=10)
        cache_service.cache_suggestions("fl", ["Flat"])
        clock.advance_ms(20)

        assert cache_service.sweep_expired() == 1

    def test_clear_all(self, cache_service):
        cache_service.cache_search_results("flat", None, [])
        cache_service.cache_suggestions("fl", ["Flat"])
        cache_service.record_query_performance("flat", 5)

        assert cache_service.clear_all() == 2
        assert cache_service.get_cached_search_results("flat") is None
        assert cache_service.performance_summary()["total_queries"] == 0
