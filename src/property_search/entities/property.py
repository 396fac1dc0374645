"""Property listing domain entities."""

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar

# Declared weight per searchable field. Fields without a weight are not scored.
DEFAULT_FIELD_WEIGHTS: dict[str, float] = {
    "title": 1.0,
    "description": 0.8,
    "location": 0.9,
    "property_type": 0.7,
}


@dataclass(frozen=True)
class PropertyConfiguration:
    """A sellable unit layout of a property (e.g. a 2 BHK variant).

    Attributes:
        id: Configuration identifier
        bhk: Bedroom-hall-kitchen count
        price: Listed price in whole currency units
        area: Carpet area in square feet
        bedrooms: Number of bedrooms
        bathrooms: Number of bathrooms
        ready_by: Optional possession date as given by the store
    """

    id: str
    bhk: int
    price: int | None = None
    area: float | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    ready_by: str | None = None


@dataclass(frozen=True)
class PropertyRecord:
    """A property listing as fetched from the store.

    Satisfies the SearchableRecord protocol. Only the fields named in
    SEARCHABLE_FIELDS take part in fuzzy matching, in that order.

    Attributes:
        id: Property identifier
        title: Listing title
        description: Free-text description
        location: Human readable location name
        property_type: Apartment, villa, plot, ...
        slug: URL slug
        status: Listing status (only "active" listings are searchable)
        location_id: Foreign key used by the store's location filter
        created_at: Creation time, newest listings come first from the store
        configurations: Unit configurations used for bhk and price filters
    """

    SEARCHABLE_FIELDS: ClassVar[tuple[str, ...]] = (
        "title",
        "description",
        "location",
        "property_type",
    )

    id: str
    title: str = ""
    description: str = ""
    location: str = ""
    property_type: str = ""
    slug: str | None = None
    status: str = "active"
    location_id: str | None = None
    created_at: datetime | None = None
    configurations: tuple[PropertyConfiguration, ...] = ()

    def searchable_fields(self) -> dict[str, str]:
        """Return the declared searchable fields in declaration order."""
        return {name: getattr(self, name) or "" for name in self.SEARCHABLE_FIELDS}

    @property
    def lowest_price(self) -> int | None:
        """Lowest configured price, or None when no configuration has a price."""
        prices = [c.price for c in self.configurations if c.price]
        return min(prices) if prices else None

    def has_bhk(self, bhk: int) -> bool:
        """Check whether any configuration offers the given bhk count."""
        return any(c.bhk == bhk for c in self.configurations)


@dataclass(frozen=True)
class LocationRecord:
    """A named location (neighbourhood, city area) offered by the store."""

    id: str
    name: str
    description: str = ""
