# =============================================================================
# tests/test_embeddings.py - Embedding Provider Adapter Tests
# =============================================================================

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import OpenAIError

from app.exceptions import UpstreamUnavailableError
from lib.embeddings import EmbeddingClient


def openai_client(*vectors):
    """Mock AsyncOpenAI returning the vectors out of order, as the API may."""
    data = [SimpleNamespace(index=i, embedding=v) for i, v in enumerate(vectors)]
    client = MagicMock()
    client.embeddings.create = AsyncMock(return_value=SimpleNamespace(data=list(reversed(data))))
    client.close = AsyncMock()
    return client


@pytest.fixture
def small_settings(settings):
    return settings.model_copy(update={"EMBEDDING_DIMENSIONS": 3})


class TestEmbeddingClient:
    """Tests for EmbeddingClient."""

    def test_disabled_without_key(self, settings):
        assert EmbeddingClient(settings).enabled is False

    @pytest.mark.asyncio
    async def test_disabled_raises_upstream(self, settings):
        with pytest.raises(UpstreamUnavailableError):
            await EmbeddingClient(settings).embed("lamp")

    @pytest.mark.asyncio
    async def test_vectors_in_input_order(self, small_settings):
        client = openai_client([1, 0, 0], [0, 1, 0])
        embeddings = EmbeddingClient(small_settings, client=client)

        vectors = await embeddings.embed_many(["first", "second"])

        assert vectors == [[1, 0, 0], [0, 1, 0]]
        client.embeddings.create.assert_awaited_once_with(
            model=small_settings.EMBEDDING_MODEL, input=["first", "second"],
        )

    @pytest.mark.asyncio
    async def test_single_text(self, small_settings):
        embeddings = EmbeddingClient(small_settings, client=openai_client([0.1, 0.2, 0.3]))

        assert await embeddings.embed("lamp") == [0.1, 0.2, 0.3]

    @pytest.mark.asyncio
    async def test_wrong_dimensions(self, small_settings):
        embeddings = EmbeddingClient(small_settings, client=openai_client([1, 2]))

        with pytest.raises(UpstreamUnavailableError):
            await embeddings.embed("lamp")

    @pytest.mark.asyncio
    async def test_provider_error(self, small_settings):
        client = openai_client()
        client.embeddings.create.side_effect = OpenAIError("rate limited")
        embeddings = EmbeddingClient(small_settings, client=client)

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await embeddings.embed("lamp")

        assert exc_info.value.details["error"] == "rate limited"

    @pytest.mark.asyncio
    async def test_close(self, small_settings):
        client = openai_client()

        await EmbeddingClient(small_settings, client=client).close()

        client.close.assert_awaited_once()
