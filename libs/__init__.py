"""Shared libraries for the catalog search service.

Subpackages:
- ``libs.common``: configuration, logging, metrics, and the error taxonomy.
- ``libs.embeddings``: query embedding providers.
- ``libs.vector_store``: vector index abstraction and the Qdrant backend.
- ``libs.document_store``: catalog document store and the MongoDB backend.

Notes:
- Avoid service-specific logic; keep modules cohesive and broadly useful.
"""
