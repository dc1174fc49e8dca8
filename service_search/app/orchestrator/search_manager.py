"""Search manager for dual-mode catalog retrieval.

Answers a free-text query with either lexical (document store full-text
ranking) or semantic (query embedding -> vector index -> hydration) results
and returns both in the same envelope.

Policy
- Validation happens before any outbound call
- The semantic chain is strictly sequential within a request
- No retries and no fallback: a failing stage aborts the request with an
  ``UpstreamError`` naming that stage
"""

import time
from contextlib import suppress
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, Iterable, List, Optional, TypeVar

import structlog

from libs.common.config import SearchConfig
from libs.common.errors import SearchStage, UpstreamError
from libs.common.metrics import MetricsCollector
from libs.document_store.base import DocumentStore, ScoredItem
from libs.document_store.mongo import MongoDocumentStore
from libs.embeddings.base import Embedder
from libs.embeddings.factory import create_embedder
from libs.vector_store.base import VectorSearcher
from libs.vector_store.qdrant import QdrantVectorSearcher
from ..retrievers.hydrator import MissingReferencePolicy, ResultHydrator
from .modes import (
    DEFAULT_LEXICAL_TOKENS,
    DEFAULT_LIMIT,
    SearchMode,
    coerce_limit,
    resolve_mode,
    validate_query,
)

logger = structlog.get_logger("search_service.search_manager")

T = TypeVar("T")


@dataclass
class SearchResponse:
    """Result envelope for one request; built once and never cached."""
    items: List[ScoredItem] = field(default_factory=list)
    query: str = ""
    mode: str = SearchMode.SEMANTIC.value

    @property
    def count(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "count": self.count,
            "query": self.query,
            "mode": self.mode,
        }


class SearchManager:
    """Orchestrates the retrieval adapters.

    Responsibilities
    - Validate the query and coerce mode/limit
    - Run the lexical or the semantic chain
    - Truncate to the effective limit and build the ``SearchResponse``
    """

    def __init__(
        self,
        embedder: Embedder,
        vector_searcher: VectorSearcher,
        document_store: DocumentStore,
        *,
        default_limit: int = DEFAULT_LIMIT,
        lexical_tokens: Iterable[str] = DEFAULT_LEXICAL_TOKENS,
        missing_reference_policy: MissingReferencePolicy = MissingReferencePolicy.DROP,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self.embedder = embedder
        self.vector_searcher = vector_searcher
        self.document_store = document_store
        self.default_limit = default_limit
        self.lexical_tokens = tuple(lexical_tokens)
        self.hydrator = ResultHydrator(
            document_store,
            policy=missing_reference_policy,
            metrics_collector=metrics_collector,
        )

    @classmethod
    def from_config(
        cls,
        config: SearchConfig,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> "SearchManager":
        """Wire the production adapters described by ``config``."""
        return cls(
            embedder=create_embedder(config),
            vector_searcher=QdrantVectorSearcher(
                url=config.qdrant_url,
                collection_name=config.qdrant_collection,
                api_key=config.qdrant_api_key,
                document_id_key=config.qdrant_document_id_key,
            ),
            document_store=MongoDocumentStore(
                url=config.mongo_url,
                database=config.mongo_database,
                collection=config.mongo_collection,
            ),
            default_limit=config.default_limit,
            lexical_tokens=config.lexical_tokens,
            missing_reference_policy=MissingReferencePolicy(config.missing_reference_policy.lower()),
            metrics_collector=metrics_collector,
        )

    async def search(
        self,
        raw_query_text: Optional[str],
        raw_mode: Optional[str] = None,
        raw_limit: Optional[Any] = None,
    ) -> SearchResponse:
        """Run one search request.

        Raises
        - ``ValidationError`` when the query is absent or blank
        - ``UpstreamError`` when any external stage fails
        """
        text = validate_query(raw_query_text)
        selection = resolve_mode(raw_mode, self.lexical_tokens)
        limit = coerce_limit(raw_limit, self.default_limit)

        start_time = time.time()
        if selection.mode == SearchMode.LEXICAL:
            results = await self._lexical_search(text, limit)
        else:
            results = await self._semantic_search(text, limit)

        items = results[:limit]
        logger.info(
            "Search completed",
            query=text,
            mode=selection.mode.value,
            limit=limit,
            results_count=len(items),
            latency_ms=(time.time() - start_time) * 1000,
        )
        return SearchResponse(items=items, query=raw_query_text, mode=selection.label)

    async def _lexical_search(self, text: str, limit: int) -> List[ScoredItem]:
        return await self._run_stage(
            SearchStage.LEXICAL_SEARCH,
            self.document_store.text_search(text, limit),
        )

    async def _semantic_search(self, text: str, limit: int) -> List[ScoredItem]:
        vector = await self._run_stage(SearchStage.EMBEDDING, self.embedder.embed(text))
        matches = await self._run_stage(
            SearchStage.VECTOR_SEARCH,
            self.vector_searcher.search(vector, limit),
        )
        return await self._run_stage(SearchStage.HYDRATION, self.hydrator.hydrate(matches))

    async def _run_stage(self, stage: SearchStage, call: Awaitable[T]) -> T:
        """Await one external call, normalizing failures to ``UpstreamError``."""
        try:
            return await call
        except UpstreamError:
            raise
        except Exception as e:
            logger.error("Search stage failed", stage=stage.value, error=str(e))
            raise UpstreamError(stage, str(e)) from e

    async def health_check(self) -> bool:
        """Healthy when both the document store and the vector index answer."""
        store_healthy = await self.document_store.health_check()
        index_healthy = await self.vector_searcher.health_check()
        return store_healthy and index_healthy

    async def cleanup(self) -> None:
        """Close adapter clients."""
        for resource in (self.embedder, self.vector_searcher, self.document_store):
            with suppress(Exception):
                await resource.close()
        logger.info("Search manager cleanup completed")
