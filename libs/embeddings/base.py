"""Base embedding provider interface.

Query embeddings come from a remote provider. This module holds the abstract
contract plus the shared HTTP plumbing and response validation, so concrete
providers only describe their request and where the vector lives in the
response.
"""

from abc import ABC, abstractmethod
from numbers import Real
from typing import Any, Dict, Optional

import httpx
import numpy as np
import structlog

from libs.common.errors import EmbeddingError

logger = structlog.get_logger("embeddings")


def vector_from_values(values: Any) -> np.ndarray:
    """Validate a provider payload and convert it to a 1-D float vector.

    Raises ``EmbeddingError`` unless ``values`` is a non-empty list of finite
    numbers.
    """
    if not isinstance(values, (list, tuple)):
        raise EmbeddingError(f"Embedding values is not an array: {type(values).__name__}")
    if not values:
        raise EmbeddingError("Embedding values is empty")
    if not all(isinstance(v, Real) and not isinstance(v, bool) for v in values):
        raise EmbeddingError("Embedding values contain non-numeric entries")

    vector = np.asarray(values, dtype=np.float64)
    if not np.all(np.isfinite(vector)):
        raise EmbeddingError("Embedding values contain non-finite entries")
    return vector


class Embedder(ABC):
    """Converts query text into a fixed-dimension vector.

    The dimension must match the vector index; that is a deployment
    invariant, so a mismatch is logged but not rejected here.
    """

    expected_dimension: Optional[int] = None

    @abstractmethod
    async def embed(self, text: str) -> np.ndarray:
        """Embed one query string.

        Raises
        - ``EmbeddingError`` when the provider fails or the payload is malformed
        """
        pass

    async def close(self) -> None:
        return None

    def _check_dimension(self, vector: np.ndarray) -> None:
        if self.expected_dimension and vector.shape[0] != self.expected_dimension:
            logger.warning(
                "Embedding dimension mismatch",
                expected=self.expected_dimension,
                actual=int(vector.shape[0]),
            )


class HTTPEmbedder(Embedder):
    """Embedder backed by a JSON-over-HTTP provider."""

    def __init__(
        self,
        timeout: float = 30.0,
        expected_dimension: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.http_client = http_client or httpx.AsyncClient(timeout=timeout)
        self.expected_dimension = expected_dimension

    async def _post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        try:
            response = await self.http_client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Embedding request failed", url=url, error=str(e))
            raise EmbeddingError(f"Embedding request failed: {e}") from e

        if response.status_code != 200:
            logger.error("Embedding provider error", url=url, status=response.status_code)
            raise EmbeddingError(f"Embedding provider returned status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise EmbeddingError("Embedding provider returned invalid JSON") from e

        if not isinstance(data, dict):
            raise EmbeddingError("Invalid embedding result structure")
        return data

    async def close(self) -> None:
        await self.http_client.aclose()
