# =============================================================================
# core/services/product_service.py - Catalog and Review Business Logic
# =============================================================================
# Products are owned by their seller: only the seller can update or delete
# them. Deletion is soft (is_active=false, deleted_at set); soft-deleted
# products behave as if they do not exist.
#
# Reviews are one per (buyer, product). A review is a "verified purchase"
# only when the buyer has a paid, shipped or delivered order containing
# the product. Every new review recomputes the seller's reputation score.
# =============================================================================

import json
import logging
from decimal import Decimal
from typing import Any
from uuid import UUID

from app.config import Settings
from app.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidRatingError,
    NotFoundError,
    UpstreamUnavailableError,
    ValidationFailedError,
)
from core.models.notification import NotificationType
from core.models.product import ProductCreate, ProductFilters, ProductUpdate, ReviewCreate
from core.services.notification_service import NotificationService
from lib.redis_client import RedisStore
from lib.supabase_client import SupabaseStore
from lib.utils import normalize_uuid, to_money, utcnow_iso

logger = logging.getLogger(__name__)

CATEGORY_CACHE_KEY = "categories:all"

# Columns that are NOT NULL in the products table
_REQUIRED_PRODUCT_FIELDS = ("title", "price", "currency", "condition", "stock_quantity", "is_active")


def check_price_range(filters: ProductFilters) -> None:
    """
    Raises:
        ValidationFailedError: If min_price is above max_price
    """
    if (
        filters.min_price is not None
        and filters.max_price is not None
        and filters.min_price > filters.max_price
    ):
        raise ValidationFailedError("min_price cannot be greater than max_price")


class ProductService:
    """
    Service for products, categories and reviews.
    """

    def __init__(
        self,
        store: SupabaseStore,
        cache: RedisStore,
        settings: Settings,
        notifications: NotificationService,
    ):
        self.store = store
        self.cache = cache
        self.settings = settings
        self.notifications = notifications

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    async def list_categories(self) -> list[dict[str, Any]]:
        """
        Active categories, served from the cache when possible.

        A cache miss or an unreachable cache falls back to the store.
        """
        try:
            cached = await self.cache.get(CATEGORY_CACHE_KEY)
            if cached:
                return json.loads(cached)
        except UpstreamUnavailableError as e:
            logger.warning(f"Category cache read failed: {e.message}")

        categories = await self.store.list_categories()

        try:
            await self.cache.set(
                CATEGORY_CACHE_KEY,
                json.dumps(categories, default=str),
                ttl=self.settings.CATEGORY_CACHE_TTL_SECONDS,
            )
        except UpstreamUnavailableError as e:
            logger.warning(f"Category cache write failed: {e.message}")

        return categories

    async def _check_category(self, category_id: UUID | None) -> None:
        if category_id and not await self.store.get_category(category_id):
            raise NotFoundError("Category", str(category_id))

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    async def create(self, seller_id: str | UUID, data: ProductCreate) -> dict[str, Any]:
        """
        List a new product for a seller.

        Raises:
            NotFoundError: If category_id doesn't exist
        """
        await self._check_category(data.category_id)

        row = data.model_dump()
        row["seller_id"] = normalize_uuid(seller_id)
        product = await self.store.create_product(row)

        logger.info(f"Created product {product['id']} for seller {seller_id}")
        return product

    async def get(self, product_id: str | UUID) -> dict[str, Any]:
        """
        Raises:
            NotFoundError: If the product doesn't exist or was deleted
        """
        product = await self.store.get_product(product_id)
        if not product:
            raise NotFoundError("Product", str(product_id))
        return product

    async def list_products(
        self,
        filters: ProductFilters,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[dict[str, Any]], int]:
        check_price_range(filters)
        return await self.store.list_products(filters, limit, offset)

    async def _get_owned(self, product_id: str | UUID, seller_id: str | UUID) -> dict[str, Any]:
        product = await self.get(product_id)
        if str(product["seller_id"]) != str(seller_id):
            raise ForbiddenError(
                "You can only modify your own products",
                suggestion="Check that you are logged in as the product's seller",
            )
        return product

    async def update(
        self,
        product_id: str | UUID,
        seller_id: str | UUID,
        changes: ProductUpdate,
    ) -> dict[str, Any]:
        """
        Apply a partial update from the product's seller.

        Raises:
            NotFoundError: If the product (or new category) doesn't exist
            ForbiddenError: If the caller isn't the seller
            ValidationFailedError: If a required field is set to null
        """
        product = await self._get_owned(product_id, seller_id)

        values = changes.model_dump(exclude_unset=True)
        for field in _REQUIRED_PRODUCT_FIELDS:
            if field in values and values[field] is None:
                raise ValidationFailedError(f"{field} cannot be null")

        if not values:
            return product

        await self._check_category(values.get("category_id"))

        values["updated_at"] = utcnow_iso()
        updated = await self.store.update_product(product_id, values)
        if not updated:
            raise NotFoundError("Product", str(product_id))

        logger.info(f"Updated product {product_id}: {sorted(changes.model_fields_set)}")
        return updated

    async def delete(self, product_id: str | UUID, seller_id: str | UUID) -> None:
        """
        Soft-delete a product and drop its embedding.

        Raises:
            NotFoundError: If the product doesn't exist or was already deleted
            ForbiddenError: If the caller isn't the seller
        """
        await self._get_owned(product_id, seller_id)

        if not await self.store.soft_delete_product(product_id):
            raise NotFoundError("Product", str(product_id))
        await self.store.delete_embedding(product_id)

        logger.info(f"Deleted product {product_id}")

    # -------------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------------

    async def create_review(
        self,
        product_id: str | UUID,
        buyer_id: str | UUID,
        data: ReviewCreate,
    ) -> dict[str, Any]:
        """
        Review a product.

        Raises:
            InvalidRatingError: If rating is outside 1..5
            NotFoundError: If the product doesn't exist
            ForbiddenError: If the seller reviews their own product
            ConflictError: If the buyer already reviewed it
        """
        if not 1 <= data.rating <= 5:
            raise InvalidRatingError(data.rating)

        product = await self.get(product_id)
        seller_id = str(product["seller_id"])
        if seller_id == str(buyer_id):
            raise ForbiddenError("You cannot review your own product")

        if await self.store.find_review(buyer_id, product_id):
            raise ConflictError("You have already reviewed this product", code="DUPLICATE_REVIEW")

        verified = await self.store.has_purchased(buyer_id, product_id)
        review = await self.store.create_review({
            "product_id": normalize_uuid(product_id),
            "buyer_id": normalize_uuid(buyer_id),
            "seller_id": seller_id,
            "rating": data.rating,
            "title": data.title,
            "comment": data.comment,
            "is_verified_purchase": verified,
        })

        await self._update_reputation(seller_id)
        await self.notifications.notify(
            seller_id,
            NotificationType.REVIEW,
            "New review",
            f"Your product '{product['title']}' received a {data.rating}-star review",
            {"product_id": normalize_uuid(product_id), "review_id": str(review["id"])},
        )

        logger.info(f"Review {review['id']} on product {product_id} (verified={verified})")
        return review

    async def _update_reputation(self, seller_id: str) -> None:
        """Set the seller's reputation_score to their average rating."""
        ratings = await self.store.seller_ratings(seller_id)
        if not ratings:
            return
        score = to_money(Decimal(sum(ratings)) / len(ratings))
        await self.store.update_user(seller_id, {"reputation_score": score})

    async def list_reviews(
        self,
        product_id: str | UUID,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[dict[str, Any]], int]:
        await self.get(product_id)
        return await self.store.list_reviews(product_id, limit, offset)
