"""Match result domain entities."""

from dataclasses import dataclass
from typing import Literal

from property_search.protocols.searchable_record import SearchableRecord

SuggestionType = Literal["exact", "prefix", "partial", "fuzzy"]


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching a query against one record.

    Attributes:
        record: The record that was scored
        score: Combined similarity in [0, 1]
        matched_fields: Fields that contributed, in declared order
    """

    record: SearchableRecord
    score: float
    matched_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class Suggestion:
    """A ranked suggestion string.

    Attributes:
        suggestion: The dictionary string
        score: Similarity in [0, 1]
        type: How the query relates to the suggestion text
    """

    suggestion: str
    score: float
    type: SuggestionType
