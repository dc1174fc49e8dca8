"""Catalog document store adapters.

Primary components:
- ``base``: ``CatalogItem``/``ScoredItem`` records and the abstract ``DocumentStore``.
- ``mongo``: MongoDB implementation (bulk id lookup and ``$text`` search).
"""

from .base import CatalogItem, DocumentStore, ScoredItem

__all__ = ["CatalogItem", "DocumentStore", "ScoredItem"]
