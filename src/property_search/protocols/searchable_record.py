"""Searchable record protocol.

Anything the fuzzy matcher can rank must declare its text fields up front,
so field iteration is exhaustive and ordered.
"""

from collections.abc import Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class SearchableRecord(Protocol):
    """Protocol for records eligible for fuzzy matching.

    Example:
        ```python
        record: SearchableRecord = PropertyRecord(id="p1", title="3 BHK Flat")
        record.searchable_fields()  # {"title": "3 BHK Flat", "description": "", ...}
        ```
    """

    def searchable_fields(self) -> Mapping[str, str]:
        """Return field name to text, in declaration order.

        Returns:
            Ordered mapping of every searchable field
        """
        ...
