"""Client for a platform embedding service.

Speaks the ``POST /api/v1/embed`` contract: ``{"items": [{"text": ...}],
"model": ...}`` in, ``{"vectors": [[...]], ...}`` out.
"""

from typing import Optional

import httpx
import numpy as np

from libs.common.errors import EmbeddingError
from .base import HTTPEmbedder, vector_from_values


class ServiceEmbedder(HTTPEmbedder):
    """Embeds queries through a self-hosted embedding service."""

    def __init__(
        self,
        service_url: str,
        model: str = "default",
        timeout: float = 30.0,
        expected_dimension: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(
            timeout=timeout,
            expected_dimension=expected_dimension,
            http_client=http_client,
        )
        self.service_url = service_url.rstrip("/")
        self.model = model

    async def embed(self, text: str) -> np.ndarray:
        data = await self._post_json(
            f"{self.service_url}/api/v1/embed",
            {"items": [{"text": text}], "model": self.model},
        )

        vectors = data.get("vectors")
        if not isinstance(vectors, list) or not vectors:
            raise EmbeddingError("Invalid embedding result structure: missing vectors")

        vector = vector_from_values(vectors[0])
        self._check_dimension(vector)
        return vector
