"""Vector index adapters.

Primary components:
- ``base``: ``VectorMatch`` and the abstract ``VectorSearcher`` interface.
- ``qdrant``: Qdrant implementation of the interface.
"""

from .base import VectorMatch, VectorSearcher

__all__ = ["VectorMatch", "VectorSearcher"]
