"""Hydration of vector matches into full catalog items.

The vector index only knows point ids and a payload reference into the
document store. ``ResultHydrator`` resolves those references with a single
bulk lookup and re-attaches the similarity scores, keeping the index's
ranking intact.
"""

from enum import Enum
from typing import Dict, List, Optional, Sequence

import structlog

from libs.common.errors import SearchStage, UpstreamError
from libs.common.metrics import MetricsCollector
from libs.document_store.base import CatalogItem, DocumentStore, ScoredItem
from libs.vector_store.base import VectorMatch

logger = structlog.get_logger("search_service.hydrator")


class MissingReferencePolicy(str, Enum):
    """What to do with a match whose document cannot be found.

    The index and the store are updated independently, so stale references
    are expected. ``DROP`` omits them and returns fewer results; ``ERROR``
    fails the request instead.
    """
    DROP = "drop"
    ERROR = "error"


class ResultHydrator:
    """Turns ranked ``VectorMatch`` values into ranked ``ScoredItem`` values."""

    def __init__(
        self,
        document_store: DocumentStore,
        policy: MissingReferencePolicy = MissingReferencePolicy.DROP,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self.document_store = document_store
        self.policy = policy
        self.metrics_collector = metrics_collector

    async def hydrate(self, matches: Sequence[VectorMatch]) -> List[ScoredItem]:
        """Resolve matches to items, preserving the input order."""
        document_ids = [m.document_id for m in matches if m.document_id]

        documents: Dict[str, CatalogItem] = {}
        if document_ids:
            documents = await self.document_store.find_by_ids(document_ids)

        results: List[ScoredItem] = []
        missing: List[VectorMatch] = []
        for match in matches:
            item = documents.get(match.document_id) if match.document_id else None
            if item is None:
                missing.append(match)
                continue
            results.append(ScoredItem(item=item, score=match.similarity))

        if missing:
            self._handle_missing(missing)

        return results

    def _handle_missing(self, missing: List[VectorMatch]) -> None:
        if self.policy == MissingReferencePolicy.ERROR:
            raise UpstreamError(
                SearchStage.HYDRATION,
                f"{len(missing)} vector matches reference missing documents",
            )

        logger.debug(
            "Dropped vector matches without a document",
            dropped=len(missing),
            external_ids=[m.external_id for m in missing],
        )
        if self.metrics_collector is not None:
            self.metrics_collector.record_dropped_references(len(missing))
