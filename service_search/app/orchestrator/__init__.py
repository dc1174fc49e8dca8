"""Search orchestration: request coercion and the dual-mode manager."""

from .modes import SearchMode, coerce_limit, resolve_mode, validate_query
from .search_manager import SearchManager, SearchResponse

__all__ = [
    "SearchManager",
    "SearchMode",
    "SearchResponse",
    "coerce_limit",
    "resolve_mode",
    "validate_query",
]
