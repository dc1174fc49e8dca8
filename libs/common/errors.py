"""Error taxonomy shared by the search service and its adapters.

Two families matter to callers:

- ``ValidationError``: the caller's input fails a precondition. Raised before
  any outbound call is made and mapped to HTTP 400.
- ``UpstreamError``: an external dependency (embedding provider, vector
  index, document store) failed or returned malformed data. Carries the
  failing ``SearchStage`` and is mapped to HTTP 500.

Adapters raise the stage-specific subclasses so the orchestrator can report
where a request broke without inspecting backend exceptions.
"""

from enum import Enum


class SearchStage(str, Enum):
    """Pipeline stages that talk to an external service."""
    EMBEDDING = "embedding_generation"
    VECTOR_SEARCH = "vector_search"
    HYDRATION = "document_hydration"
    LEXICAL_SEARCH = "lexical_search"


class SearchError(Exception):
    """Base exception for search operations."""
    pass


class ValidationError(SearchError):
    """Caller input failed validation."""

    label = "Missing search query"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UpstreamError(SearchError):
    """An external call failed or returned malformed data.

    ``message`` is the cause text only; it never includes a traceback.
    """

    label = "Search failed"

    def __init__(self, stage: SearchStage, message: str):
        super().__init__(f"{stage.value} failed: {message}")
        self.stage = stage
        self.message = message


class EmbeddingError(UpstreamError):
    """Embedding provider failed or returned a malformed vector."""

    def __init__(self, message: str):
        super().__init__(SearchStage.EMBEDDING, message)


class VectorStoreQueryError(UpstreamError):
    """Nearest-neighbor query against the vector index failed."""

    def __init__(self, message: str):
        super().__init__(SearchStage.VECTOR_SEARCH, message)


class DocumentStoreError(UpstreamError):
    """Document store lookup or text search failed."""

    def __init__(self, stage: SearchStage, message: str):
        super().__init__(stage, message)
