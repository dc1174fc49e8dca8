"""Shared fixtures: deterministic in-memory adapters for the search service."""

from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
import pytest

from libs.document_store.base import CatalogItem, DocumentStore, ScoredItem
from libs.embeddings.base import Embedder
from libs.vector_store.base import VectorMatch, VectorSearcher
from service_search.app.orchestrator.search_manager import SearchManager


class FakeEmbedder(Embedder):
    """Returns a fixed vector and records every call."""

    def __init__(self, vector: Sequence[float] = (0.1, 0.2, 0.3), error: Optional[Exception] = None):
        self.vector = np.asarray(vector, dtype=np.float64)
        self.error = error
        self.calls: List[str] = []
        self.closed = False

    async def embed(self, text: str) -> np.ndarray:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.vector

    async def close(self) -> None:
        self.closed = True


class FakeVectorSearcher(VectorSearcher):
    """Serves a fixed ranked list of matches, honoring ``limit``."""

    def __init__(
        self,
        matches: Iterable[VectorMatch] = (),
        error: Optional[Exception] = None,
        healthy: bool = True,
    ):
        self.matches = list(matches)
        self.error = error
        self.healthy = healthy
        self.calls: List[tuple] = []
        self.closed = False

    async def search(self, vector: Sequence[float], limit: int) -> List[VectorMatch]:
        self.calls.append((list(vector), limit))
        if self.error is not None:
            raise self.error
        return self.matches[:limit]

    async def health_check(self) -> bool:
        return self.healthy

    async def close(self) -> None:
        self.closed = True


class FakeDocumentStore(DocumentStore):
    """Dictionary-backed catalog with a canned lexical ranking."""

    def __init__(
        self,
        items: Iterable[CatalogItem] = (),
        lexical_results: Iterable[ScoredItem] = (),
        lookup_error: Optional[Exception] = None,
        text_error: Optional[Exception] = None,
        healthy: bool = True,
    ):
        self.items: Dict[str, CatalogItem] = {item.id: item for item in items}
        self.lexical_results = list(lexical_results)
        self.lookup_error = lookup_error
        self.text_error = text_error
        self.healthy = healthy
        self.lookups: List[List[str]] = []
        self.text_calls: List[tuple] = []
        self.closed = False

    async def find_by_ids(self, ids: Iterable[str]) -> Dict[str, CatalogItem]:
        ids = list(ids)
        self.lookups.append(ids)
        if self.lookup_error is not None:
            raise self.lookup_error
        return {i: self.items[i] for i in ids if i in self.items}

    async def text_search(self, text: str, limit: int) -> List[ScoredItem]:
        self.text_calls.append((text, limit))
        if self.text_error is not None:
            raise self.text_error
        return self.lexical_results[:limit]

    async def health_check(self) -> bool:
        return self.healthy

    async def close(self) -> None:
        self.closed = True


def make_item(index: int) -> CatalogItem:
    return CatalogItem(
        id=f"item-{index}",
        title=f"Wooden chair {index}",
        description=f"Vintage oak chair number {index}",
        start_price=10.0 * index,
        reserve_price=15.0 * index,
    )


@pytest.fixture
def catalog() -> List[CatalogItem]:
    """Fifteen catalog items, ``item-0`` .. ``item-14``."""
    return [make_item(i) for i in range(15)]


@pytest.fixture
def vector_matches(catalog) -> List[VectorMatch]:
    """One match per catalog item, similarity descending."""
    return [
        VectorMatch(
            external_id=f"point-{i}",
            similarity=round(0.99 - i * 0.05, 4),
            payload={"mongo_id": item.id},
            document_id=item.id,
        )
        for i, item in enumerate(catalog)
    ]


@pytest.fixture
def lexical_results(catalog) -> List[ScoredItem]:
    """Text-relevance ranking over the catalog, score descending."""
    return [ScoredItem(item=item, score=round(3.0 - i * 0.1, 4)) for i, item in enumerate(catalog)]


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def vector_searcher(vector_matches) -> FakeVectorSearcher:
    return FakeVectorSearcher(vector_matches)


@pytest.fixture
def document_store(catalog, lexical_results) -> FakeDocumentStore:
    return FakeDocumentStore(catalog, lexical_results)


@pytest.fixture
def search_manager(embedder, vector_searcher, document_store) -> SearchManager:
    return SearchManager(embedder, vector_searcher, document_store)
