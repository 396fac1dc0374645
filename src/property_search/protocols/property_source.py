"""Property source protocol.

The property store is an external collaborator. The search layer only needs
to pull a candidate superset of active listings and the active locations.

Implementations can include:
- In-memory fixture repository (default, used by tests and the demo)
- A backend-as-a-service or SQL client
"""

from typing import Protocol, runtime_checkable

from property_search.entities.property import LocationRecord, PropertyRecord


@runtime_checkable
class PropertySource(Protocol):
    """Protocol for candidate retrieval.

    Retrieval may only narrow candidates by structured criteria. Relevance
    ranking is done by the fuzzy matcher, never by the source.
    """

    def fetch_active_properties(self, location_id: str | None = None) -> list[PropertyRecord]:
        """Fetch active listings, newest first.

        Args:
            location_id: Restrict to a single location when given

        Returns:
            Candidate properties
        """
        ...

    def fetch_active_locations(self) -> list[LocationRecord]:
        """Fetch active locations.

        Returns:
            Location records
        """
        ...

    def health_check(self) -> bool:
        """Check if the source is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...
