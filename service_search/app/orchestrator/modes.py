"""Request coercion: retrieval mode, result limit, and query validation."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

from libs.common.errors import ValidationError

DEFAULT_LIMIT = 10
DEFAULT_LEXICAL_TOKENS = ("mongo", "lexical")


class SearchMode(str, Enum):
    """Closed set of retrieval paths.

    ``SEMANTIC`` is the default: any ``m`` value that is not a lexical token,
    including none at all, selects it. That keeps old clients working, but it
    also means a typo silently routes to the path with two remote
    dependencies instead of one.
    """
    LEXICAL = "lexical"
    SEMANTIC = "semantic"


DEFAULT_MODE = SearchMode.SEMANTIC


@dataclass(frozen=True)
class ModeSelection:
    """Resolved mode plus the label echoed back to the caller."""
    mode: SearchMode
    label: str


def resolve_mode(
    raw_mode: Optional[Any],
    lexical_tokens: Iterable[str] = DEFAULT_LEXICAL_TOKENS,
) -> ModeSelection:
    """Map the raw ``m`` parameter onto a ``SearchMode``.

    Matching is exact. A lexical token is echoed as given (``"mongo"`` stays
    ``"mongo"``); every other input resolves to the semantic default.
    """
    if isinstance(raw_mode, str) and raw_mode in tuple(lexical_tokens):
        return ModeSelection(SearchMode.LEXICAL, raw_mode)
    return ModeSelection(DEFAULT_MODE, DEFAULT_MODE.value)


def coerce_limit(raw_limit: Optional[Any], default: int = DEFAULT_LIMIT) -> int:
    """Parse the raw ``n`` parameter into a positive result count.

    Only plain ASCII digits (surrounding whitespace allowed) are accepted;
    signs, underscores, and other Unicode digits fall back to ``default``,
    as do absent and zero values. There is no upper bound.
    """
    if raw_limit is None or isinstance(raw_limit, bool):
        return default

    if isinstance(raw_limit, int):
        value = raw_limit
    else:
        text = str(raw_limit).strip()
        if not (text.isascii() and text.isdigit()):
            return default
        value = int(text, 10)

    return value if value > 0 else default


def validate_query(raw_query_text: Optional[Any]) -> str:
    """Return the trimmed query text or raise ``ValidationError``."""
    text = raw_query_text.strip() if isinstance(raw_query_text, str) else ""
    if not text:
        raise ValidationError('Please provide a search term using the "q" query parameter')
    return text
