"""MongoDB document store implementation."""

from typing import Any, Dict, Iterable, List, Optional

import structlog
from bson import Decimal128, ObjectId
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from libs.common.errors import DocumentStoreError, SearchStage
from .base import MAX_BACKEND_LIMIT, CatalogItem, DocumentStore, ScoredItem

logger = structlog.get_logger("document_store.mongo")

# Fields exposed by search; nothing else leaves the store.
ITEM_PROJECTION: Dict[str, Any] = {
    "_id": 1,
    "title": 1,
    "description": 1,
    "start_price": 1,
    "reserve_price": 1,
}

TEXT_SCORE = {"$meta": "textScore"}


def _as_price(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, Decimal128):
        return float(value.to_decimal())
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_item(doc: Dict[str, Any]) -> CatalogItem:
    return CatalogItem(
        id=str(doc["_id"]),
        title=doc.get("title") or "",
        description=doc.get("description") or "",
        start_price=_as_price(doc.get("start_price")),
        reserve_price=_as_price(doc.get("reserve_price")),
    )


def _to_query_id(value: str) -> Any:
    """Match ObjectId-shaped identifiers as ObjectIds, anything else verbatim."""
    if ObjectId.is_valid(value):
        return ObjectId(value)
    return value


class MongoDocumentStore(DocumentStore):
    """Catalog reads against a MongoDB collection.

    The collection needs a text index over ``title`` and ``description`` for
    ``text_search``; creating it is outside this service.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        database: str = "auction",
        collection: str = "auctionItems",
        *,
        client: Optional[Any] = None,
    ):
        """Initialize the store.

        Args:
            url: MongoDB connection string, used when ``client`` is not given
            database: Database holding the catalog
            collection: Catalog collection name
            client: Preconfigured async client (shared pools, tests)
        """
        self.client = client if client is not None else AsyncMongoClient(url)
        self.database_name = database
        self.collection_name = collection
        self.collection = self.client[database][collection]

    async def find_by_ids(self, ids: Iterable[str]) -> Dict[str, CatalogItem]:
        unique_ids = list(dict.fromkeys(i for i in ids if i))
        if not unique_ids:
            return {}

        # Canonical id -> ids as the caller spelled them (ObjectId hex may be upper case)
        requested: Dict[str, List[str]] = {}
        for raw_id in unique_ids:
            requested.setdefault(str(_to_query_id(raw_id)), []).append(raw_id)

        query_ids = [_to_query_id(i) for i in requested]
        try:
            cursor = self.collection.find({"_id": {"$in": query_ids}}, ITEM_PROJECTION)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Bulk id lookup failed", requested=len(unique_ids), error=str(e))
            raise DocumentStoreError(SearchStage.HYDRATION, str(e)) from e

        items = {}
        for doc in docs:
            item = _to_item(doc)
            for raw_id in requested.get(item.id, [item.id]):
                items[raw_id] = item

        logger.debug("Bulk id lookup completed", requested=len(unique_ids), found=len(items))
        return items

    async def text_search(self, text: str, limit: int) -> List[ScoredItem]:
        projection = dict(ITEM_PROJECTION, score=TEXT_SCORE)
        try:
            cursor = (
                self.collection.find({"$text": {"$search": text}}, projection)
                .sort([("score", TEXT_SCORE)])
                .limit(min(limit, MAX_BACKEND_LIMIT))
            )
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Text search failed", error=str(e))
            raise DocumentStoreError(SearchStage.LEXICAL_SEARCH, str(e)) from e

        results = [ScoredItem(item=_to_item(doc), score=float(doc.get("score", 0.0))) for doc in docs]
        logger.debug("Text search completed", results_count=len(results))
        return results

    async def health_check(self) -> bool:
        try:
            await self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error("MongoDB health check failed", error=str(e))
            return False

    async def close(self) -> None:
        await self.client.close()
