"""Query embedding providers.

Primary components:
- ``base``: abstract ``Embedder`` and response validation.
- ``gemini`` / ``service``: HTTP providers.
- ``factory``: ``create_embedder(config)``.
"""

from .base import Embedder

__all__ = ["Embedder"]
