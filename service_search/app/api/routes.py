"""API routes for search service."""

import time
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from ..orchestrator.search_manager import SearchManager
from ..runtime.metrics import MetricsCollector

router = APIRouter()


class SearchResultItem(BaseModel):
    """One ranked catalog item."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Document store identifier")
    title: str = Field(..., description="Item title")
    description: str = Field(..., description="Item description")
    start_price: Optional[float] = Field(..., description="Opening price")
    reserve_price: Optional[float] = Field(..., description="Reserve price")
    score: float = Field(..., description="Text relevance (lexical) or cosine similarity (semantic)")


class SearchResponseModel(BaseModel):
    """Response model for search endpoint."""
    items: List[SearchResultItem] = Field(..., description="Results in descending score order")
    count: int = Field(..., description="Number of items returned")
    query: str = Field(..., description="Original query")
    mode: str = Field(..., description="Retrieval mode that produced the items")


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx answer."""
    error: str = Field(..., description="Short machine-readable label")
    message: str = Field(..., description="Human-readable explanation")


def get_search_manager(request: Request) -> SearchManager:
    """Get search manager from application state."""
    return request.app.state.search_manager


def get_metrics(request: Request) -> MetricsCollector:
    """Get metrics collector from application state."""
    return request.app.state.metrics_collector


@router.get(
    "/search",
    response_model=SearchResponseModel,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def search(
    q: Optional[str] = Query(None, description="Search text"),
    n: Optional[str] = Query(None, description="Maximum number of results (default 10)"),
    m: Optional[str] = Query(None, description="'mongo' for lexical search; anything else is semantic"),
    search_manager: SearchManager = Depends(get_search_manager),
    metrics_collector: MetricsCollector = Depends(get_metrics),
):
    """Search the catalog.

    ``n`` and ``m`` are taken as raw strings so malformed values fall back
    to their defaults instead of failing request validation.
    """
    start_time = time.time()

    response = await search_manager.search(q, m, n)

    metrics_collector.record_search(
        mode=response.mode,
        duration=time.time() - start_time,
    )

    return SearchResponseModel(
        items=[SearchResultItem(**result.to_dict()) for result in response.items],
        count=response.count,
        query=response.query,
        mode=response.mode,
    )
