"""In-memory implementation of PropertySource.

Stands in for the hosted property store. Records can be passed directly or
loaded from a JSON fixture shaped like the store's API payload:

    {
        "properties": [
            {"id": "p1", "title": "...", "location_id": "l1",
             "property_configurations": [{"id": "c1", "bhk": 2, "price": 5000000}]}
        ],
        "locations": [{"id": "l1", "name": "Andheri", "description": "Mumbai"}]
    }
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from property_search.entities import LocationRecord, PropertyConfiguration, PropertyRecord

logger = logging.getLogger(__name__)


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    # fromisoformat does not take a trailing Z before Python 3.11
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def property_from_dict(data: dict[str, Any]) -> PropertyRecord:
    """Build a PropertyRecord from a store payload.

    Args:
        data: Property payload with optional nested "property_configurations"

    Returns:
        The property record
    """
    configurations = tuple(
        PropertyConfiguration(
            id=str(config["id"]),
            bhk=int(config["bhk"]),
            price=config.get("price"),
            area=config.get("area"),
            bedrooms=config.get("bedrooms"),
            bathrooms=config.get("bathrooms"),
            ready_by=config.get("ready_by"),
        )
        for config in data.get("property_configurations") or []
    )
    return PropertyRecord(
        id=str(data["id"]),
        title=data.get("title") or "",
        description=data.get("description") or "",
        location=data.get("location") or "",
        property_type=data.get("property_type") or "",
        slug=data.get("slug"),
        status=data.get("status") or "active",
        location_id=data.get("location_id"),
        created_at=_parse_datetime(data.get("created_at")),
        configurations=configurations,
    )


class InMemoryPropertyRepository:
    """Fixture-backed property source.

    This class satisfies the PropertySource protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        properties: list[PropertyRecord] | None = None,
        locations: list[LocationRecord] | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            properties: Property records, any status.
            locations: Location records.
        """
        self._properties = list(properties or [])
        self._locations = list(locations or [])

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryPropertyRepository":
        """Factory method to load a repository from a JSON fixture.

        Args:
            path: Path to the fixture file

        Returns:
            Populated InMemoryPropertyRepository
        """
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        properties = [property_from_dict(item) for item in payload.get("properties", [])]
        locations = [
            LocationRecord(
                id=str(item["id"]),
                name=item["name"],
                description=item.get("description") or "",
            )
            for item in payload.get("locations", [])
        ]
        logger.info("Loaded %d properties and %d locations from %s", len(properties), len(locations), path)
        return cls(properties=properties, locations=locations)

    def fetch_active_properties(self, location_id: str | None = None) -> list[PropertyRecord]:
        """Fetch active listings, newest first."""
        candidates = [
            p
            for p in self._properties
            if p.status == "active" and (location_id is None or p.location_id == location_id)
        ]
        candidates.sort(
            key=lambda p: p.created_at.timestamp() if p.created_at else float("-inf"),
            reverse=True,
        )
        return candidates

    def fetch_active_locations(self) -> list[LocationRecord]:
        """Fetch active locations."""
        return list(self._locations)

    def health_check(self) -> bool:
        """In-memory data is always reachable."""
        return True
