"""Embedder factory.

Centralizes creation of concrete ``Embedder`` providers so the search
service doesn't depend on a specific one.
"""

from enum import Enum

import structlog

from libs.common.config import BaseConfig
from .base import Embedder
from .gemini import GeminiEmbedder
from .service import ServiceEmbedder

logger = structlog.get_logger("embeddings.factory")


class EmbeddingProvider(Enum):
    """Supported embedding providers."""
    GEMINI = "gemini"
    SERVICE = "service"


def create_embedder(config: BaseConfig) -> Embedder:
    """Create the embedder selected by ``config.embedding_provider``.

    For ``service`` the base URL is the embedding service root and the model
    name is forwarded as-is.
    """
    try:
        provider = EmbeddingProvider(config.embedding_provider.lower())
    except ValueError:
        raise ValueError(f"Unsupported embedding provider: {config.embedding_provider}") from None

    logger.info("Creating embedder", provider=provider.value, model=config.embedding_model)

    if provider == EmbeddingProvider.GEMINI:
        return GeminiEmbedder(
            api_key=config.embedding_api_key,
            model=config.embedding_model,
            base_url=config.embedding_base_url,
            timeout=config.embedding_timeout_seconds,
            expected_dimension=config.vector_dimension,
        )

    return ServiceEmbedder(
        service_url=config.embedding_base_url,
        model=config.embedding_model,
        timeout=config.embedding_timeout_seconds,
        expected_dimension=config.vector_dimension,
    )
