"""Tests for the MongoDB document store."""

import pytest
from bson import Decimal128, ObjectId
from pymongo.errors import OperationFailure

from libs.common.errors import DocumentStoreError, SearchStage
from libs.document_store.mongo import MongoDocumentStore


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs
        self.sort_spec = None
        self.limit_value = None

    def sort(self, spec):
        self.sort_spec = spec
        return self

    def limit(self, value):
        self.limit_value = value
        return self

    async def to_list(self, length=None):
        if self.limit_value:
            return self.docs[:self.limit_value]
        return list(self.docs)


class FakeCollection:
    """Implements just enough of ``find`` for the store."""

    def __init__(self, docs=(), error=None):
        self.docs = list(docs)
        self.error = error
        self.find_calls = []
        self.cursor = None

    def find(self, query, projection=None):
        self.find_calls.append((query, projection))
        if self.error is not None:
            raise self.error
        if "_id" in query:
            wanted = query["_id"]["$in"]
            docs = [d for d in self.docs if d["_id"] in wanted]
        else:
            docs = list(self.docs)
        self.cursor = FakeCursor(docs)
        return self.cursor


OID_1 = ObjectId("650000000000000000000001")
OID_2 = ObjectId("650000000000000000000002")

DOCS = [
    {"_id": OID_1, "title": "Wooden chair", "description": "Oak", "start_price": 10, "reserve_price": Decimal128("25.50")},
    {"_id": OID_2, "title": "Vintage lamp", "description": "Brass", "start_price": 5.5},
    {"_id": "legacy-7", "title": "Clock", "description": None, "start_price": "n/a", "reserve_price": 12},
]


def make_store(collection):
    return MongoDocumentStore(database="auction", collection="auctionItems", client={"auction": {"auctionItems": collection}})


@pytest.mark.asyncio
async def test_find_by_ids_is_one_bulk_lookup():
    """ObjectId-shaped ids become ObjectIds; others are matched verbatim."""
    collection = FakeCollection(DOCS)
    store = make_store(collection)

    items = await store.find_by_ids([str(OID_2), "legacy-7", "unknown", str(OID_2)])

    assert len(collection.find_calls) == 1
    query, projection = collection.find_calls[0]
    assert query == {"_id": {"$in": [OID_2, "legacy-7", "unknown"]}}
    assert set(projection) == {"_id", "title", "description", "start_price", "reserve_price"}
    assert set(items) == {str(OID_2), "legacy-7"}

    lamp = items[str(OID_2)]
    assert lamp.title == "Vintage lamp"
    assert lamp.start_price == 5.5
    assert lamp.reserve_price is None

    clock = items["legacy-7"]
    assert clock.description == ""
    assert clock.start_price is None
    assert clock.reserve_price == 12.0


@pytest.mark.asyncio
async def test_find_by_ids_empty_input_skips_query():
    collection = FakeCollection(DOCS)

    assert await make_store(collection).find_by_ids([]) == {}
    assert collection.find_calls == []


@pytest.mark.asyncio
async def test_text_search_projection_sort_and_limit():
    docs = [dict(DOCS[0], score=2.5), dict(DOCS[1], score=1.25)]
    collection = FakeCollection(docs)
    store = make_store(collection)

    results = await store.text_search("wooden", limit=1)

    query, projection = collection.find_calls[0]
    assert query == {"$text": {"$search": "wooden"}}
    assert projection["score"] == {"$meta": "textScore"}
    assert collection.cursor.sort_spec == [("score", {"$meta": "textScore"})]
    assert collection.cursor.limit_value == 1

    assert len(results) == 1
    assert results[0].score == 2.5
    assert results[0].to_dict() == {
        "_id": str(OID_1),
        "title": "Wooden chair",
        "description": "Oak",
        "start_price": 10.0,
        "reserve_price": 25.5,
        "score": 2.5,
    }


@pytest.mark.asyncio
async def test_text_search_failure_is_typed():
    store = make_store(FakeCollection(error=OperationFailure("text index required for $text query")))

    with pytest.raises(DocumentStoreError) as exc_info:
        await store.text_search("wooden", limit=5)

    assert exc_info.value.stage == SearchStage.LEXICAL_SEARCH
    assert "text index required" in exc_info.value.message


@pytest.mark.asyncio
async def test_lookup_failure_is_typed():
    store = make_store(FakeCollection(error=OperationFailure("not primary")))

    with pytest.raises(DocumentStoreError) as exc_info:
        await store.find_by_ids([str(OID_1)])

    assert exc_info.value.stage == SearchStage.HYDRATION


@pytest.mark.asyncio
async def test_find_by_ids_keys_results_as_requested():
    """Upper-case ObjectId hex resolves and comes back under the caller's spelling."""
    collection = FakeCollection(DOCS)
    upper = str(OID_1).upper()

    items = await make_store(collection).find_by_ids([upper, str(OID_1)])

    query, _ = collection.find_calls[0]
    assert query == {"_id": {"$in": [OID_1]}}
    assert set(items) == {upper, str(OID_1)}
    assert items[upper].id == str(OID_1)


@pytest.mark.asyncio
async def test_text_search_caps_limit_sent_to_mongo():
    collection = FakeCollection(DOCS)

    results = await make_store(collection).text_search("wooden", limit=99999999999999999999)

    assert collection.cursor.limit_value == 2**31 - 1
    assert len(results) == len(DOCS)
