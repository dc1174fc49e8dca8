"""Base vector searcher interface.

Defines the abstract nearest-neighbor contract the search service depends
on, independent of the backing index (Qdrant today).

All methods are asynchronous to support high-throughput services.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

# Largest limit handed to the index; callers may ask for more and still
# truncate on their side.
MAX_BACKEND_LIMIT = 2**31 - 1


@dataclass(frozen=True)
class VectorMatch:
    """One nearest-neighbor hit.

    ``document_id`` is the bridge back to the document store, read from the
    point payload. ``None`` means the payload did not carry it.
    """
    external_id: str
    similarity: float
    payload: Dict[str, Any] = field(default_factory=dict)
    document_id: Optional[str] = None


class VectorSearcher(ABC):
    """Abstract base class for vector indexes.

    Implementations return hits in the backend's native ranking (descending
    similarity) and never re-sort.
    """

    @abstractmethod
    async def search(self, vector: Sequence[float], limit: int) -> List[VectorMatch]:
        """Search for the ``limit`` nearest neighbors of ``vector``.

        Raises
        - ``VectorStoreQueryError`` when the index cannot be queried
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the vector index is healthy."""
        pass

    async def close(self) -> None:
        return None
