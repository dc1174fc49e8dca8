"""Catalog search service.

The FastAPI application lives in ``service_search.app``.
"""
