# =============================================================================
# core/services/search_service.py - Keyword and Semantic Search
# =============================================================================
# Two rankings over the same catalog:
# - keyword: Postgres full-text search (ts_rank), always available
# - semantic: cosine similarity between the query's embedding and each
#   product's combined embedding (pgvector)
#
# Semantic search degrades to keyword search when the embedding provider
# is slow, failing or not configured. The response reports which mode
# actually produced the results.
# =============================================================================

import asyncio
import logging
from typing import Any
from uuid import UUID

from app.config import Settings
from app.exceptions import MarketplaceException, NotFoundError, UpstreamUnavailableError, ValidationFailedError
from core.models.product import ProductFilters, SearchMode
from core.services.product_service import check_price_range
from core.services.user_service import UserService
from lib.embeddings import EmbeddingClient
from lib.supabase_client import SupabaseStore
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


def _scored(rows: list[dict[str, Any]], score_field: str) -> list[dict[str, Any]]:
    """Rename the store's ranking column to `score`."""
    results = []
    for row in rows:
        result = dict(row)
        result["score"] = result.pop(score_field, None)
        results.append(result)
    return results


def embedding_text(product: dict[str, Any]) -> str:
    """Text used for a product's combined embedding."""
    parts = [product.get("title") or "", product.get("description") or ""]
    tags = product.get("tags") or []
    if tags:
        parts.append(" ".join(tags))
    return "\n\n".join(part for part in parts if part)


class SearchService:
    """
    Service for product search and embedding maintenance.
    """

    def __init__(
        self,
        store: SupabaseStore,
        embeddings: EmbeddingClient,
        users: UserService,
        settings: Settings,
    ):
        self.store = store
        self.embeddings = embeddings
        self.users = users
        self.settings = settings

    @staticmethod
    def _clean_query(query: str) -> str:
        query = query.strip()
        if not query:
            raise ValidationFailedError("Search query cannot be empty")
        return query

    async def keyword_search(
        self,
        query: str,
        filters: ProductFilters,
        limit: int = 20,
        offset: int = 0,
        user_id: str | UUID | None = None,
    ) -> list[dict[str, Any]]:
        """Full-text search, best match first. Records the query in search history."""
        query = self._clean_query(query)
        check_price_range(filters)
        rows = await self.store.keyword_search(query, filters, limit, offset)
        if user_id:
            await self.users.record_search(user_id, query)
        return _scored(rows, "rank")

    async def semantic_search(
        self,
        query: str,
        category_id: str | UUID | None = None,
        limit: int = 10,
        offset: int = 0,
        user_id: str | UUID | None = None,
    ) -> tuple[list[dict[str, Any]], SearchMode]:
        """
        Rank products by similarity to the query's meaning.

        Returns:
            Tuple of (results, mode). mode is KEYWORD when the embedding
            step timed out or failed and keyword search answered instead.
        """
        query = self._clean_query(query)

        try:
            vector = await asyncio.wait_for(
                self.embeddings.embed(query),
                timeout=self.settings.SEMANTIC_SEARCH_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Query embedding timed out after {self.settings.SEMANTIC_SEARCH_TIMEOUT_SECONDS}s, "
                "falling back to keyword search"
            )
            return await self._keyword_fallback(query, category_id, limit, offset, user_id)
        except UpstreamUnavailableError as e:
            logger.warning(f"Query embedding unavailable ({e.details.get('error')}), falling back to keyword search")
            return await self._keyword_fallback(query, category_id, limit, offset, user_id)

        rows = await self.store.semantic_search(vector, category_id, limit, offset)
        if user_id:
            await self.users.record_search(user_id, query)
        return _scored(rows, "similarity"), SearchMode.SEMANTIC

    async def _keyword_fallback(
        self,
        query: str,
        category_id: str | UUID | None,
        limit: int,
        offset: int,
        user_id: str | UUID | None,
    ) -> tuple[list[dict[str, Any]], SearchMode]:
        filters = ProductFilters(category_id=category_id)
        results = await self.keyword_search(query, filters, limit, offset, user_id)
        return results, SearchMode.KEYWORD

    async def similar_products(self, product_id: str | UUID, limit: int = 10) -> list[dict[str, Any]]:
        """
        Nearest neighbours of a product's stored embedding.

        Returns an empty list while the product has no embedding yet.

        Raises:
            NotFoundError: If the product doesn't exist
        """
        if not await self.store.get_product(product_id):
            raise NotFoundError("Product", str(product_id))

        vector = await self.store.get_embedding(product_id)
        if vector is None:
            return []

        rows = await self.store.semantic_search(vector, None, limit, 0, exclude_product_id=product_id)
        return _scored(rows, "similarity")

    # -------------------------------------------------------------------------
    # Embedding maintenance
    # -------------------------------------------------------------------------

    async def refresh_embedding(self, product: dict[str, Any]) -> None:
        """
        Recompute and store a product's embeddings.

        Runs after the response is sent; failures are logged and the old
        embedding (if any) stays in place until the next change.
        """
        if not self.embeddings.enabled:
            logger.debug(f"Embeddings disabled, skipping product {product['id']}")
            return

        title = product.get("title") or ""
        description = product.get("description") or ""
        texts = [title, embedding_text(product)]
        if description:
            texts.append(description)

        try:
            vectors = await self.embeddings.embed_many(texts)
            await self.store.upsert_embedding(
                product["id"],
                title_embedding=vectors[0],
                description_embedding=vectors[2] if description else None,
                combined_embedding=vectors[1],
            )
        except MarketplaceException as e:
            logger.warning(f"Failed to refresh embedding for product {product['id']}: {e.message}")
            return

        logger.info(f"Refreshed embedding for product {normalize_uuid(product['id'])}")
