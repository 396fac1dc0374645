"""
Tests for fuzzy scoring, ranking and suggestions.
"""

import pytest

from property_search.entities import PropertyRecord
from property_search.matcher import (
    auto_correct_query,
    classify_suggestion,
    generate_suggestions,
    match_record,
    normalize_text,
    score,
    search_records,
    suggestion_category,
)


def make_record(record_id: str, title: str = "", **fields) -> PropertyRecord:
    return PropertyRecord(id=record_id, title=title, **fields)


@pytest.fixture
def spec_candidates():
    return [
        make_record("1", "3 BHK Flat in Mumbai"),
        make_record("2", "2 BHK Villa in Pune"),
        make_record("3", "3BHK Apartment Mumbai Central"),
    ]


class TestNormalizeText:
    def test_case_folds_and_collapses(self):
        assert normalize_text("  Sea   View, PENTHOUSE! ") == "sea view penthouse"

    def test_unicode_forms(self):
        assert normalize_text("Straße") == normalize_text("STRASSE")
        assert normalize_text("ﬁnest") == "finest"

    def test_non_string(self):
        assert normalize_text(None) == ""


class TestScore:
    def test_exact_match_is_one(self):
        assert score("Mumbai", "mUMBAI") == 1.0

    def test_exact_match_after_unicode_folding(self):
        assert score("CAFÉ Street", "café street") == 1.0

    @pytest.mark.parametrize("query,field", [("mumbai", ""), ("", "Mumbai"), ("   ", "Mumbai"), ("?!", "Mumbai")])
    def test_empty_sides_score_zero(self, query, field):
        assert score(query, field) == 0.0

    def test_disjoint_strings_score_zero(self):
        assert score("xyz", "abc") == 0.0

    def test_substring_scores_by_position(self):
        early = score("3 bhk", "3 BHK Flat in Mumbai")
        late = score("mumbai", "3 BHK Flat in Mumbai")
        assert early == pytest.approx(0.9)
        assert 0.8 < late < early

    def test_tolerates_transposition(self):
        assert score("apartmnet", "Apartment") > 0.7

    def test_token_overlap_in_any_order(self):
        assert score("mumbai 3 bhk", "3 BHK Flat in Mumbai") == pytest.approx(0.85)

    def test_partial_token_overlap_scores_proportionally(self):
        assert score("3 bhk mumbai", "2 BHK Villa in Pune") < 0.4

    def test_non_string_field_scores_zero(self):
        assert score("mumbai", None) == 0.0

    def test_non_string_query_raises(self):
        with pytest.raises(TypeError):
            score(None, "Mumbai")

    def test_score_is_bounded(self):
        for field in ["Mumbai", "Mumbai Central", "Navi Mumbai", "Pune", "mumbai!!"]:
            assert 0.0 <= score("mumbai", field) <= 1.0


class TestMatchRecord:
    def test_weighted_max_and_matched_fields(self):
        record = make_record(
            "p1",
            "3 BHK Flat in Mumbai",
            description="Sea facing flat",
            location="Mumbai",
            property_type="Apartment",
        )

        result = match_record("mumbai", record)

        # location is an exact match weighted 0.9, title a substring at 1.0
        assert result.score == pytest.approx(0.9)
        assert result.matched_fields == ("title", "location")
        assert result.record is record

    def test_only_weighted_fields_are_scored(self):
        record = make_record("p1", "Villa", location="Mumbai")

        result = match_record("mumbai", record, weights={"title": 1.0})

        assert result.score == 0.0
        assert result.matched_fields == ()

    def test_field_threshold_filters_matched_fields(self):
        record = make_record("p1", "3 BHK Flat in Mumbai", location="Mumbai")

        result = match_record("mumbai", record, field_threshold=0.95)

        assert result.matched_fields == ("location",)

    def test_monotonic_in_field_score(self):
        weaker = make_record("a", "Flat", location="Pune")
        stronger = make_record("a", "Flat", location="Mumbai")

        assert score("mumbai", "Mumbai") >= score("mumbai", "Pune")
        assert match_record("mumbai", stronger).score >= match_record("mumbai", weaker).score

    def test_invalid_weight_raises(self):
        with pytest.raises(ValueError):
            match_record("flat", make_record("a", "Flat"), weights={"title": 1.5})

    @pytest.mark.parametrize("field_threshold", [-0.1, 1.5])
    def test_invalid_field_threshold_raises(self, field_threshold):
        with pytest.raises(ValueError):
            match_record("flat", make_record("a", "Flat"), field_threshold=field_threshold)


class TestSearchRecords:
    def test_example_scenario(self, spec_candidates):
        results = search_records("3 bhk mumbai", spec_candidates, threshold=0.4, max_results=2)

        assert [r.record.id for r in results] == ["1", "3"]
        assert all(r.score > 0.4 for r in results)
        assert results[0].score >= results[1].score

    def test_threshold_contract(self, spec_candidates):
        for threshold in (0.0, 0.3, 0.5, 0.85, 0.9, 1.0):
            results = search_records("3 bhk mumbai", spec_candidates, threshold=threshold, max_results=10)
            assert all(r.score >= threshold for r in results)

    def test_sorted_descending(self):
        records = [
            make_record("a", "Flat near Mumbai airport"),
            make_record("b", "Mumbai"),
            make_record("c", "Mumbai Central"),
        ]

        results = search_records("mumbai", records, threshold=0.0, max_results=10)
        scores = [r.score for r in results]

        assert scores == sorted(scores, reverse=True)
        assert results[0].record.id == "b"

    def test_ties_keep_input_order(self):
        records = [make_record(str(i), "Villa in Goa") for i in range(5)]

        results = search_records("villa goa", records, threshold=0.1, max_results=10)

        assert [r.record.id for r in results] == ["0", "1", "2", "3", "4"]

    def test_idempotent(self, spec_candidates):
        first = search_records("3 bhk mumbai", spec_candidates, threshold=0.2, max_results=3)
        second = search_records("3 bhk mumbai", spec_candidates, threshold=0.2, max_results=3)

        assert first == second

    def test_truncates_to_max_results(self, spec_candidates):
        results = search_records("bhk", spec_candidates, threshold=0.1, max_results=1)

        assert len(results) == 1

    @pytest.mark.parametrize("query", ["", "   ", "!!! ...", "-_-"])
    def test_blank_or_punctuation_query_is_empty(self, spec_candidates, query):
        assert search_records(query, spec_candidates) == []

    def test_empty_collection(self):
        assert search_records("flat", []) == []

    @pytest.mark.parametrize("threshold", [-0.1, 1.5])
    def test_invalid_threshold_raises(self, spec_candidates, threshold):
        with pytest.raises(ValueError):
            search_records("flat", spec_candidates, threshold=threshold)

    def test_negative_max_results_raises(self, spec_candidates):
        with pytest.raises(ValueError):
            search_records("flat", spec_candidates, max_results=-1)

    def test_non_string_query_raises(self, spec_candidates):
        with pytest.raises(TypeError):
            search_records(42, spec_candidates)


class TestGenerateSuggestions:
    def test_example_scenario(self):
        results = generate_suggestions(
            "munbai",
            ["Mumbai", "Mumbai Central", "Pune"],
            threshold=0.5,
            max_results=3,
        )
        texts = [s.suggestion for s in results]

        assert texts[:2] == ["Mumbai", "Mumbai Central"]
        assert "Pune" not in texts[:2]

    def test_prefix_outranks_fuzzy_at_equal_score(self):
        results = generate_suggestions(
            "apartments",
            ["apartmentz", "Apartments in Pune"],
            threshold=0.5,
            max_results=5,
        )

        assert [s.type for s in results] == ["prefix", "fuzzy"]
        assert results[0].score == pytest.approx(results[1].score)

    def test_exact_type(self):
        (result,) = generate_suggestions("Pune", ["pune"])

        assert result.type == "exact"
        assert result.score == 1.0

    def test_partial_type(self):
        (result,) = generate_suggestions("central", ["Mumbai Central"])

        assert result.type == "partial"

    def test_skips_blank_and_non_string_entries(self):
        results = generate_suggestions("pune", ["Pune", None, "   ", 7])

        assert [s.suggestion for s in results] == ["Pune"]

    def test_blank_query(self):
        assert generate_suggestions("  ", ["Pune"]) == []

    def test_empty_dictionary(self):
        assert generate_suggestions("pune", []) == []

    def test_max_results(self):
        results = generate_suggestions("villa", ["Villa", "Villa Goa", "Villa Pune"], max_results=2)

        assert len(results) == 2


class TestClassifySuggestion:
    @pytest.mark.parametrize(
        "query,suggestion,expected",
        [
            ("Pune", "pune", "exact"),
            ("mum", "Mumbai", "prefix"),
            ("central", "Mumbai Central", "partial"),
            ("munbai", "Mumbai", "fuzzy"),
        ],
    )
    def test_types(self, query, suggestion, expected):
        assert classify_suggestion(query, suggestion) == expected


class TestAutoCorrect:
    def test_corrects_misspelled_terms(self):
        assert auto_correct_query("apartmnt in mumbay") == "apartment in mumbai"

    def test_leaves_unknown_words(self):
        assert auto_correct_query("xyzzy flat") == "xyzzy flat"

    def test_empty_inputs(self):
        assert auto_correct_query("") == ""
        assert auto_correct_query("mumbay", []) == "mumbay"


class TestSuggestionCategory:
    @pytest.mark.parametrize(
        "text,category",
        [
            ("2 BHK apartment", "property_type"),
            ("Pune", "location"),
            ("3 bedroom homes", "configuration"),
            ("Swimming pool", "amenity"),
            ("Ready to move", "status"),
            ("Under 50L", "general"),
        ],
    )
    def test_categories(self, text, category):
        assert suggestion_category(text) == category
