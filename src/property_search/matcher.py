"""
Fuzzy matching for property search.

Scores free-text queries against record fields and suggestion strings with
typo tolerance. Everything here is a pure function of its inputs: no I/O,
no shared state.

Scoring ladder for a single field:
    1.0           exact match after normalization
    (0.8, 0.9]    query is a substring of the field (earlier is better)
    up to 0.85    token overlap, where a query token counts fully when a field
                  word contains it, and partially when a field word is within
                  a small edit distance
    (0.6, 1.0)    whole-string Levenshtein similarity, only above 0.6
"""

import re
import unicodedata
from collections.abc import Iterable, Mapping, Sequence

from rapidfuzz.distance import Levenshtein

from property_search.entities import (
    DEFAULT_FIELD_WEIGHTS,
    MatchResult,
    Suggestion,
    SuggestionType,
)
from property_search.protocols import SearchableRecord

SUBSTRING_BASE = 0.9
SUBSTRING_SPAN = 0.1
TOKEN_WEIGHT = 0.85
TOKEN_SIMILARITY_FLOOR = 0.75
EDIT_SIMILARITY_FLOOR = 0.6
AUTOCORRECT_FLOOR = 0.8
AUTOCORRECT_MIN_WORD_LENGTH = 3

_NON_WORD = re.compile(r"[\W_]+")

_TYPE_RANK: dict[str, int] = {"exact": 0, "prefix": 1, "partial": 2, "fuzzy": 3}

# Common real estate terms used for auto-correction and suggestions
REAL_ESTATE_DICTIONARY: tuple[str, ...] = (
    "apartment", "house", "villa", "penthouse", "commercial", "residential",
    "bedroom", "bathroom", "kitchen", "balcony", "parking", "garden",
    "mumbai", "delhi", "bangalore", "pune", "hyderabad", "chennai",
    "bhk", "sqft", "square feet", "carpet area", "built up area",
    "ready to move", "under construction", "newly launched", "resale",
)

_CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("property_type", ("apartment", "house", "villa", "penthouse")),
    ("location", ("mumbai", "bangalore", "delhi", "pune")),
    ("configuration", ("bhk", "bedroom")),
    ("amenity", ("pool", "gym", "parking", "garden")),
    ("status", ("ready", "under construction", "newly launched")),
)


def normalize_text(text: object) -> str:
    """Normalize text for comparison.

    Applies NFKC normalization and case folding, replaces punctuation and
    underscores with spaces and collapses whitespace. Non-string input
    normalizes to an empty string.

    Args:
        text: Raw text

    Returns:
        Normalized text, possibly empty
    """
    if not isinstance(text, str):
        return ""
    folded = unicodedata.normalize("NFKC", text).casefold()
    return _NON_WORD.sub(" ", folded).strip()


def _require_query(query: object) -> str:
    if not isinstance(query, str):
        raise TypeError(f"query must be a string, got {type(query).__name__}")
    return query


def _validate_options(threshold: float, max_results: int) -> None:
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must be between 0 and 1, got {threshold}")
    if max_results < 0:
        raise ValueError(f"max_results must not be negative, got {max_results}")


def _validate_weights(weights: Mapping[str, float]) -> None:
    for name, weight in weights.items():
        if not 0.0 <= weight <= 1.0:
            raise ValueError(f"weight for field '{name}' must be between 0 and 1, got {weight}")


def _token_score(query_tokens: list[str], field_tokens: list[str]) -> float:
    total = 0.0
    for token in query_tokens:
        if any(token in word for word in field_tokens):
            total += 1.0
            continue
        best = max(
            (Levenshtein.normalized_similarity(token, word) for word in field_tokens),
            default=0.0,
        )
        if best >= TOKEN_SIMILARITY_FLOOR:
            total += best
    return total / len(query_tokens) * TOKEN_WEIGHT


def _edit_score(query: str, text: str) -> float:
    similarity = Levenshtein.normalized_similarity(query, text)
    return similarity if similarity > EDIT_SIMILARITY_FLOOR else 0.0


def _score_normalized(query: str, text: str) -> float:
    if not query or not text:
        return 0.0
    if query == text:
        return 1.0

    position = text.find(query)
    if position != -1:
        return SUBSTRING_BASE - (position / len(text)) * SUBSTRING_SPAN

    return max(_token_score(query.split(), text.split()), _edit_score(query, text))


def score(query: str, field: str) -> float:
    """Compute similarity between a query and one field's text.

    Args:
        query: The user query
        field: The field text. Non-string values score 0.0.

    Returns:
        Similarity in [0, 1]. 1.0 for an exact case-insensitive match,
        0.0 when either side is empty or the strings are disjoint.

    Raises:
        TypeError: If query is not a string
    """
    return _score_normalized(normalize_text(_require_query(query)), normalize_text(field))


def _match_normalized(
    normalized_query: str,
    record: SearchableRecord,
    weights: Mapping[str, float],
    field_threshold: float,
) -> MatchResult:
    combined = 0.0
    matched_fields: list[str] = []

    for name, text in record.searchable_fields().items():
        weight = weights.get(name)
        if weight is None:
            continue
        field_score = _score_normalized(normalized_query, normalize_text(text))
        # Weighted max keeps the combination monotonic in every field score
        combined = max(combined, field_score * weight)
        if field_score > field_threshold:
            matched_fields.append(name)

    return MatchResult(record=record, score=combined, matched_fields=tuple(matched_fields))


def match_record(
    query: str,
    record: SearchableRecord,
    weights: Mapping[str, float] | None = None,
    field_threshold: float = 0.0,
) -> MatchResult:
    """Score a record by combining its per-field scores.

    The combined score is the weighted maximum over the record's declared
    fields that have a weight. Fields without a weight are ignored.

    Args:
        query: The user query
        record: Record exposing its searchable fields
        weights: Field name to weight in [0, 1]. Defaults to DEFAULT_FIELD_WEIGHTS.
        field_threshold: A field is reported as matched when its own score exceeds this

    Returns:
        MatchResult with the combined score and matched fields in declared order

    Raises:
        TypeError: If query is not a string
        ValueError: If a weight or field_threshold is outside [0, 1]
    """
    if not 0.0 <= field_threshold <= 1.0:
        raise ValueError(f"field_threshold must be between 0 and 1, got {field_threshold}")
    weights = DEFAULT_FIELD_WEIGHTS if weights is None else weights
    _validate_weights(weights)
    normalized_query = normalize_text(_require_query(query))
    return _match_normalized(normalized_query, record, weights, field_threshold)


def search_records(
    query: str,
    records: Iterable[SearchableRecord],
    threshold: float = 0.4,
    max_results: int = 10,
    weights: Mapping[str, float] | None = None,
) -> list[MatchResult]:
    """Rank records against a query, best first.

    Results scoring below threshold are dropped. Ties keep the input order.

    Args:
        query: The user query
        records: Candidate records
        threshold: Minimum combined score to keep (0-1)
        max_results: Maximum number of results to return
        weights: Field weights. Defaults to DEFAULT_FIELD_WEIGHTS.

    Returns:
        Ranked list of MatchResult, empty for a blank query or no candidates

    Raises:
        TypeError: If query is not a string
        ValueError: If threshold, max_results or a weight is out of range
    """
    _validate_options(threshold, max_results)
    weights = DEFAULT_FIELD_WEIGHTS if weights is None else weights
    _validate_weights(weights)

    normalized_query = normalize_text(_require_query(query))
    if not normalized_query:
        return []

    results = [
        match
        for match in (_match_normalized(normalized_query, r, weights, 0.0) for r in records)
        if match.score >= threshold
    ]
    # sorted() is stable, also with reverse=True
    results = sorted(results, key=lambda m: m.score, reverse=True)
    return results[:max_results]


def classify_suggestion(query: str, suggestion: str) -> SuggestionType:
    """Classify how a query relates to a suggestion string.

    Args:
        query: The user query
        suggestion: The candidate suggestion

    Returns:
        "exact", "prefix", "partial" or "fuzzy"
    """
    normalized_query = normalize_text(query)
    normalized_suggestion = normalize_text(suggestion)
    if normalized_suggestion == normalized_query:
        return "exact"
    if normalized_suggestion.startswith(normalized_query):
        return "prefix"
    if normalized_query in normalized_suggestion:
        return "partial"
    return "fuzzy"


def generate_suggestions(
    query: str,
    dictionary: Iterable[str],
    threshold: float = 0.6,
    max_results: int = 5,
) -> list[Suggestion]:
    """Rank dictionary strings as suggestions for a query.

    Ordering is by score, then by match type (exact, prefix, partial, fuzzy),
    then by dictionary order. A prefix match therefore always outranks a
    fuzzy match of equal score.

    Args:
        query: The user query
        dictionary: Candidate suggestion strings. Blank and non-string items are skipped.
        threshold: Minimum score to keep (0-1)
        max_results: Maximum number of suggestions to return

    Returns:
        Ranked list of Suggestion

    Raises:
        TypeError: If query is not a string
        ValueError: If threshold or max_results is out of range
    """
    _validate_options(threshold, max_results)
    normalized_query = normalize_text(_require_query(query))
    if not normalized_query:
        return []

    suggestions: list[Suggestion] = []
    for candidate in dictionary:
        normalized_candidate = normalize_text(candidate)
        if not normalized_candidate:
            continue
        candidate_score = _score_normalized(normalized_query, normalized_candidate)
        if candidate_score < threshold:
            continue
        suggestions.append(
            Suggestion(
                suggestion=candidate,
                score=candidate_score,
                type=classify_suggestion(normalized_query, normalized_candidate),
            )
        )

    suggestions.sort(key=lambda s: (-s.score, _TYPE_RANK[s.type]))
    return suggestions[:max_results]


def auto_correct_query(query: str, dictionary: Sequence[str] = REAL_ESTATE_DICTIONARY) -> str:
    """Replace likely misspelled words with dictionary terms.

    Words shorter than three characters are left alone. A word is replaced
    by the best scoring dictionary term only when that score exceeds 0.8.

    Args:
        query: The user query
        dictionary: Known terms

    Returns:
        The corrected query, or the query unchanged when nothing is close enough
    """
    if not query or not dictionary:
        return query or ""

    corrected: list[str] = []
    for word in query.split(" "):
        best_match, best_score = word, 0.0
        if len(word) >= AUTOCORRECT_MIN_WORD_LENGTH:
            normalized_word = normalize_text(word)
            for term in dictionary:
                term_score = _score_normalized(normalized_word, normalize_text(term))
                if term_score > best_score and term_score > AUTOCORRECT_FLOOR:
                    best_match, best_score = term, term_score
        corrected.append(best_match)

    return " ".join(corrected)


def suggestion_category(suggestion: str) -> str:
    """Categorize a suggestion for display grouping.

    Args:
        suggestion: Suggestion text

    Returns:
        One of property_type, location, configuration, amenity, status, general
    """
    lowered = normalize_text(suggestion)
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return "general"
