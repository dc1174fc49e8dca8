"""Tests for the catalog search service.

Unit tests run against in-memory fakes of the embedding provider, vector
index, and document store; no external services are required.
"""
