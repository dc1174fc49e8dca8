"""API subpackage for the search service.

The router exposes ``GET /search``. Transport layer remains thin and
delegates to ``SearchManager``.
"""
