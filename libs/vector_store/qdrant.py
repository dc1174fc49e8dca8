"""Qdrant vector searcher implementation."""

from typing import Any, Dict, List, Optional, Sequence

import structlog
from qdrant_client import AsyncQdrantClient

from libs.common.errors import VectorStoreQueryError
from .base import MAX_BACKEND_LIMIT, VectorMatch, VectorSearcher

logger = structlog.get_logger("vector_store.qdrant")


class QdrantVectorSearcher(VectorSearcher):
    """Nearest-neighbor search over a Qdrant collection.

    Points are expected to carry the document store identifier in their
    payload under ``document_id_key`` (``mongo_id`` by default).
    """

    def __init__(
        self,
        url: Optional[str] = None,
        collection_name: str = "auction_items",
        api_key: Optional[str] = None,
        document_id_key: str = "mongo_id",
        *,
        client: Optional[Any] = None,
    ):
        """Initialize the searcher.

        Args:
            url: Qdrant HTTP endpoint, used when ``client`` is not given
            collection_name: Collection holding the item vectors
            api_key: Optional Qdrant API key
            document_id_key: Payload field bridging to the document store
            client: Preconfigured ``AsyncQdrantClient`` (shared pools, tests)
        """
        self.client = client if client is not None else AsyncQdrantClient(url=url, api_key=api_key)
        self.collection_name = collection_name
        self.document_id_key = document_id_key

    async def search(self, vector: Sequence[float], limit: int) -> List[VectorMatch]:
        query = vector.tolist() if hasattr(vector, "tolist") else list(vector)
        try:
            response = await self.client.query_points(
                collection_name=self.collection_name,
                query=query,
                limit=min(limit, MAX_BACKEND_LIMIT),
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            logger.error("Vector search failed", collection=self.collection_name, error=str(e))
            raise VectorStoreQueryError(str(e)) from e

        matches = [self._to_match(point) for point in response.points]
        logger.debug("Vector search completed", collection=self.collection_name, results_count=len(matches))
        return matches

    def _to_match(self, point: Any) -> VectorMatch:
        payload: Dict[str, Any] = dict(point.payload or {})
        document_id = payload.get(self.document_id_key)
        return VectorMatch(
            external_id=str(point.id),
            similarity=float(point.score),
            payload=payload,
            document_id=str(document_id) if document_id else None,
        )

    async def health_check(self) -> bool:
        try:
            return bool(await self.client.collection_exists(self.collection_name))
        except Exception as e:
            logger.error("Qdrant health check failed", error=str(e))
            return False

    async def close(self) -> None:
        await self.client.close()
