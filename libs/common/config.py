"""Configuration management for the catalog search service.

Centralizes environment-driven configuration. It builds on
``pydantic_settings.BaseSettings`` so configuration can be provided via
environment variables, ``.env`` files, or defaults.

Highlights
- Strongly-typed settings with sensible defaults
- One place to discover the environment variables the service reads
- Every variable carries the ``SEARCH_`` prefix (case-insensitive)

Usage
- Inject the config in the service entrypoint: ``config = SearchConfig()``
- Or select dynamically: ``config = get_config("search")``
"""

from typing import Annotated, Any, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration shared by every process of the service.

    Parameters are read from the process environment, e.g. ``log_level`` is
    read from ``SEARCH_LOG_LEVEL``. Defaults keep local development
    convenient while still being explicit.
    """

    model_config = SettingsConfigDict(
        env_prefix="SEARCH_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = Field(default="local")

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    # Document store (MongoDB)
    mongo_url: str = Field(default="mongodb://localhost:27017")
    mongo_database: str = Field(default="auction")
    mongo_collection: str = Field(default="auctionItems")

    # Vector index (Qdrant)
    qdrant_url: str = Field(default="http://localhost:6333")
    qdrant_api_key: Optional[str] = Field(default=None)
    qdrant_collection: str = Field(default="auction_items")
    qdrant_document_id_key: str = Field(default="mongo_id")

    # Embeddings
    embedding_provider: str = Field(default="gemini")
    embedding_model: str = Field(default="models/text-embedding-004")
    embedding_base_url: str = Field(default="https://generativelanguage.googleapis.com")
    embedding_api_key: Optional[str] = Field(default=None)
    embedding_timeout_seconds: float = Field(default=30.0)
    vector_dimension: int = Field(default=768)


class SearchConfig(BaseConfig):
    """Configuration for the search API.

    Adds the HTTP port and the request-level search semantics.
    """

    port: int = Field(default=9007)
    default_limit: int = Field(default=10, gt=0)
    # Values of ``m`` that select the lexical path; anything else is semantic.
    # Read from the environment as a comma-separated list, e.g. ``mongo,lexical``.
    lexical_tokens: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["mongo", "lexical"])
    missing_reference_policy: str = Field(default="drop")

    @field_validator("lexical_tokens", mode="before")
    @classmethod
    def split_tokens(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [token.strip() for token in value.split(",") if token.strip()]
        return value


def get_config(service_name: str) -> BaseConfig:
    """Get configuration for a specific process.

    Parameters
    - service_name: ``search`` for the API; anything else yields ``BaseConfig``.
    """
    config_map = {
        "search": SearchConfig,
    }

    # Default to ``BaseConfig`` to avoid surprising crashes for unknown names.
    config_class = config_map.get(service_name, BaseConfig)
    return config_class()
