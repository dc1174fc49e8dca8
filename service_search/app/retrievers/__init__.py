"""Post-retrieval helpers for the semantic path."""

from .hydrator import MissingReferencePolicy, ResultHydrator

__all__ = ["MissingReferencePolicy", "ResultHydrator"]
