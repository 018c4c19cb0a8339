# =============================================================================
# lib/embeddings.py - Embedding Provider Adapter
# =============================================================================
# Wraps the OpenAI embeddings endpoint.
#
# Vectors are EMBEDDING_DIMENSIONS floats (1536 for text-embedding-ada-002),
# matching the vector(1536) columns in product_embeddings.
# =============================================================================

from __future__ import annotations

import logging

from openai import AsyncOpenAI, OpenAIError

from app.config import Settings
from app.exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)


class EmbeddingClient:
    """
    Turns text into vectors.

    When no API key is configured the client is disabled: every call
    raises UpstreamUnavailableError and semantic features degrade.
    """

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None):
        self.model = settings.EMBEDDING_MODEL
        self.dimensions = settings.EMBEDDING_DIMENSIONS
        if client is None and settings.OPENAI_API_KEY:
            client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY, max_retries=0)
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def embed(self, text: str) -> list[float]:
        """Embed a single text."""
        vectors = await self.embed_many([text])
        return vectors[0]

    async def embed_many(self, texts: list[str]) -> list[list[float]]:
        """
        Embed several texts in one provider call.

        Returns:
            One vector per input, in input order

        Raises:
            UpstreamUnavailableError: If disabled or the provider call fails
        """
        if self._client is None:
            raise UpstreamUnavailableError("Embedding provider", "OPENAI_API_KEY is not configured")

        try:
            response = await self._client.embeddings.create(model=self.model, input=texts)
        except OpenAIError as e:
            logger.warning(f"Embedding request failed: {e}")
            raise UpstreamUnavailableError("Embedding provider", str(e)) from e

        data = sorted(response.data, key=lambda item: item.index)
        vectors = [list(item.embedding) for item in data]
        for vector in vectors:
            if len(vector) != self.dimensions:
                raise UpstreamUnavailableError(
                    "Embedding provider",
                    f"Expected {self.dimensions} dimensions, got {len(vector)}",
                )
        return vectors

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
