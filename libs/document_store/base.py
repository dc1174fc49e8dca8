"""Base document store interface.

Defines the catalog record types and the abstract contract the search
service depends on, independent of the backing database.

All methods are asynchronous so many requests can share one event loop.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional

# Largest limit handed to the database; callers may ask for more and still
# truncate on their side.
MAX_BACKEND_LIMIT = 2**31 - 1


@dataclass(frozen=True)
class CatalogItem:
    """An auction catalog record as exposed by search."""
    id: str
    title: str = ""
    description: str = ""
    start_price: Optional[float] = None
    reserve_price: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape: the identifier is published as ``_id``."""
        data = asdict(self)
        data["_id"] = data.pop("id")
        return data


@dataclass(frozen=True)
class ScoredItem:
    """A catalog item with the relevance or similarity score that ranked it."""
    item: CatalogItem
    score: float

    def to_dict(self) -> Dict[str, Any]:
        data = self.item.to_dict()
        data["score"] = self.score
        return data


class DocumentStore(ABC):
    """Abstract base class for the catalog document store.

    Implementations only read; the catalog is owned elsewhere.
    """

    @abstractmethod
    async def find_by_ids(self, ids: Iterable[str]) -> Dict[str, CatalogItem]:
        """Fetch many items in a single round trip.

        Returns
        - Mapping keyed by the identifiers as passed in; unknown or malformed
          identifiers are simply absent from the mapping.
        """
        pass

    @abstractmethod
    async def text_search(self, text: str, limit: int) -> List[ScoredItem]:
        """Full-text search ranked by the store's native relevance.

        Returns
        - At most ``limit`` items in descending relevance order.
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the document store is reachable."""
        pass

    async def close(self) -> None:
        """Release client resources."""
        return None
