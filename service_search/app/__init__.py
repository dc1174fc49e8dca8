"""Search service package.

Layout:
- ``api``: HTTP endpoint for catalog search.
- ``orchestrator``: mode/limit coercion and the ``SearchManager``.
- ``retrievers``: hydration of semantic matches into catalog items.
- ``runtime``: service-local metrics and runtime helpers.
"""
