"""Gemini embedding provider (``embedContent`` REST endpoint)."""

from typing import Optional

import httpx
import numpy as np
import structlog

from libs.common.errors import EmbeddingError
from .base import HTTPEmbedder, vector_from_values

logger = structlog.get_logger("embeddings.gemini")


class GeminiEmbedder(HTTPEmbedder):
    """Embeds queries with a Gemini embedding model.

    ``model`` accepts either ``models/text-embedding-004`` or the bare name.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "models/text-embedding-004",
        base_url: str = "https://generativelanguage.googleapis.com",
        timeout: float = 30.0,
        expected_dimension: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(
            timeout=timeout,
            expected_dimension=expected_dimension,
            http_client=http_client,
        )
        self.api_key = api_key
        self.model = model if model.startswith("models/") else f"models/{model}"
        self.base_url = base_url.rstrip("/")

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/v1beta/{self.model}:embedContent"

    async def embed(self, text: str) -> np.ndarray:
        headers = {"x-goog-api-key": self.api_key} if self.api_key else None
        data = await self._post_json(
            self.endpoint,
            {"model": self.model, "content": {"parts": [{"text": text}]}},
            headers=headers,
        )

        embedding = data.get("embedding")
        if not isinstance(embedding, dict) or "values" not in embedding:
            raise EmbeddingError("Invalid embedding result structure: missing embedding.values")

        vector = vector_from_values(embedding["values"])
        self._check_dimension(vector)
        logger.debug("Query embedded", model=self.model, dimension=int(vector.shape[0]))
        return vector
