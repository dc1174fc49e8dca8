"""Tests for the Qdrant vector searcher."""

from types import SimpleNamespace

import numpy as np
import pytest

from libs.common.errors import SearchStage, VectorStoreQueryError
from libs.vector_store.qdrant import QdrantVectorSearcher


class FakeQdrantClient:
    """Stands in for ``AsyncQdrantClient``."""

    def __init__(self, points=(), error=None, exists=True):
        self.points = list(points)
        self.error = error
        self.exists = exists
        self.calls = []
        self.closed = False

    async def query_points(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(points=self.points)

    async def collection_exists(self, collection_name):
        if self.error is not None:
            raise self.error
        return self.exists

    async def close(self):
        self.closed = True


def point(point_id, score, payload):
    return SimpleNamespace(id=point_id, score=score, payload=payload)


@pytest.mark.asyncio
async def test_search_maps_points_in_backend_order():
    """Points become VectorMatch values without re-sorting."""
    client = FakeQdrantClient([
        point("a1", 0.91, {"mongo_id": "650000000000000000000001"}),
        point(7, 0.87, {"mongo_id": "650000000000000000000002", "title": "Lamp"}),
    ])
    searcher = QdrantVectorSearcher(collection_name="auction_items", client=client)

    matches = await searcher.search(np.array([0.1, 0.2]), limit=2)

    assert [m.external_id for m in matches] == ["a1", "7"]
    assert [m.similarity for m in matches] == [0.91, 0.87]
    assert matches[0].document_id == "650000000000000000000001"
    assert matches[1].payload["title"] == "Lamp"
    call = client.calls[0]
    assert call["collection_name"] == "auction_items"
    assert call["query"] == [0.1, 0.2]
    assert call["limit"] == 2
    assert call["with_payload"] is True


@pytest.mark.asyncio
async def test_missing_bridge_field_is_not_an_error():
    """A payload without the document id yields ``document_id=None``."""
    client = FakeQdrantClient([point("a1", 0.5, None), point("a2", 0.4, {"other": 1})])
    searcher = QdrantVectorSearcher(client=client)

    matches = await searcher.search([0.1], limit=5)

    assert [m.document_id for m in matches] == [None, None]


@pytest.mark.asyncio
async def test_custom_bridge_key():
    client = FakeQdrantClient([point("a1", 0.5, {"doc": "x-1"})])
    searcher = QdrantVectorSearcher(document_id_key="doc", client=client)

    matches = await searcher.search([0.1], limit=1)

    assert matches[0].document_id == "x-1"


@pytest.mark.asyncio
async def test_transport_failure_raises_query_error():
    searcher = QdrantVectorSearcher(client=FakeQdrantClient(error=ConnectionError("refused")))

    with pytest.raises(VectorStoreQueryError) as exc_info:
        await searcher.search([0.1], limit=3)

    assert exc_info.value.stage == SearchStage.VECTOR_SEARCH
    assert exc_info.value.message == "refused"


@pytest.mark.asyncio
async def test_health_check_and_close():
    client = FakeQdrantClient(exists=True)
    searcher = QdrantVectorSearcher(client=client)

    assert await searcher.health_check() is True
    client.error = ConnectionError("down")
    assert await searcher.health_check() is False

    await searcher.close()
    assert client.closed


@pytest.mark.asyncio
async def test_oversized_limit_is_capped():
    client = FakeQdrantClient([point("a1", 0.5, {"mongo_id": "x"})])
    searcher = QdrantVectorSearcher(client=client)

    matches = await searcher.search([0.1], limit=99999999999999999999)

    assert client.calls[0]["limit"] == 2**31 - 1
    assert len(matches) == 1
