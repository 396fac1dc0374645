import logging
import math
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

from property_search.entities import MatchResult, QueryPerformanceSample

logger = logging.getLogger(__name__)


@dataclass
class PerformanceLog:
    """Track response times of search queries.

    Samples are kept in a ring buffer: once max_samples is reached the oldest
    sample is dropped for every new one. Lifetime counters keep counting past
    the window.
    """

    max_samples: int = 1000
    clock: Callable[[], float] = time.time
    total_queries: int = 0
    total_response_time_ms: int = 0
    _samples: deque[QueryPerformanceSample] = field(init=False, repr=False)
    _lock: threading.Lock = field(init=False, repr=False, default_factory=threading.Lock)

    def __post_init__(self) -> None:
        if self.max_samples < 1:
            raise ValueError("max_samples must be at least 1")
        self._samples = deque(maxlen=self.max_samples)

    def record(self, query: str, response_time_ms: int) -> None:
        """Record a query response time.

        Never raises: unusable samples are logged and dropped.
        """
        if isinstance(response_time_ms, bool) or not isinstance(response_time_ms, (int, float)):
            logger.warning("Dropping performance sample with non-numeric time: %r", response_time_ms)
            return
        if isinstance(response_time_ms, float) and not math.isfinite(response_time_ms):
            logger.warning("Dropping performance sample with non-finite time: %r", response_time_ms)
            return
        if response_time_ms < 0:
            logger.warning("Dropping performance sample with negative time: %s", response_time_ms)
            return

        sample = QueryPerformanceSample(
            query=query if isinstance(query, str) else str(query),
            response_time_ms=int(response_time_ms),
            timestamp=self.clock(),
        )
        with self._lock:
            self._samples.append(sample)
            self.total_queries += 1
            self.total_response_time_ms += sample.response_time_ms

    @property
    def samples(self) -> list[QueryPerformanceSample]:
        """Retained samples, oldest first."""
        with self._lock:
            return list(self._samples)

    @property
    def avg_response_time_ms(self) -> float:
        """Average response time over the lifetime of the log."""
        if self.total_queries == 0:
            return 0.0
        return self.total_response_time_ms / self.total_queries

    def reset(self) -> None:
        """Drop all samples and counters."""
        with self._lock:
            self._samples.clear()
            self.total_queries = 0
            self.total_response_time_ms = 0

    def to_dict(self) -> dict[str, float | int | None]:
        """Summarize the retained window and lifetime counters."""
        samples = self.samples
        times = [s.response_time_ms for s in samples]
        return {
            "total_queries": self.total_queries,
            "avg_response_time_ms": self.avg_response_time_ms,
            "window_size": len(samples),
            "window_avg_response_time_ms": sum(times) / len(times) if times else 0.0,
            "window_max_response_time_ms": max(times) if times else 0,
            "last_query": samples[-1].query if samples else None,
        }


@dataclass
class SearchOutcome:
    """Result of a property search request."""

    results: list[MatchResult]
    cache_hit: bool
    response_time_ms: int
    fuzzy: bool

    @property
    def total(self) -> int:
        """Number of results returned."""
        return len(self.results)


@dataclass
class RankedSuggestion:
    """A suggestion ready for display.

    Score and type are only known when the suggestion was freshly ranked;
    suggestions served from cache carry the text and category only.
    """

    text: str
    category: str
    score: float | None = None
    type: str | None = None


@dataclass
class SuggestionOutcome:
    """Result of a suggestion request."""

    suggestions: list[RankedSuggestion]
    cache_hit: bool
    response_time_ms: int
    corrected_query: str
