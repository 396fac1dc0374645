"""Query performance sample domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class QueryPerformanceSample:
    """A single observed search response time.

    Attributes:
        query: The query text as received
        response_time_ms: Time taken to answer the query in milliseconds
        timestamp: When the sample was recorded (Unix timestamp)
    """

    query: str
    response_time_ms: int
    timestamp: float
