# =============================================================================
# lib/supabase_client.py - Relational Store Adapter
# =============================================================================
# This module provides a typed wrapper for Supabase (Postgres) operations.
#
# SupabaseStore holds an AsyncClient and exposes only the queries this
# service needs. Callers never see the driver:
# - Unique-constraint violations become typed domain errors
# - Every other driver failure becomes UpstreamUnavailableError
#
# Operations that touch several rows (placing an order, cancelling with
# restock, cart upsert) run inside stored functions so Postgres executes
# them as one transaction. See migrations/002_functions.sql.
#
# Usage:
#   store = await SupabaseStore.connect(settings)
#   user = await store.get_user(user_id)
# =============================================================================

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable
from uuid import UUID

import httpx
from postgrest.exceptions import APIError
from pydantic_core import to_jsonable_python
from supabase import AsyncClient, acreate_client

from app.config import Settings
from app.exceptions import (
    AlreadyExistsError,
    ConflictError,
    DuplicateEmailError,
    DuplicateUsernameError,
    InsufficientStockError,
    UpstreamUnavailableError,
)
from core.models.order import PURCHASED_STATUSES, OrderStatus, PaymentStatus
from core.models.product import ProductFilters, ProductSort
from lib.utils import normalize_uuid, utcnow_iso

# Set up logging for this module
logger = logging.getLogger(__name__)

# Postgres SQLSTATE codes surfaced by PostgREST
UNIQUE_VIOLATION = "23505"
RAISE_EXCEPTION = "P0001"

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")

ErrorMap = dict[str, Callable[[APIError], Exception | None]]


def _first(data: Any) -> dict[str, Any] | None:
    """Return the first row of a PostgREST payload (list or single object)."""
    if isinstance(data, list):
        return data[0] if data else None
    return data or None


def _payload(data: dict[str, Any]) -> dict[str, Any]:
    """Make a dict JSON-safe (Decimal, UUID, datetime) for the HTTP driver."""
    return to_jsonable_python(data)


def _parse_vector(value: Any) -> list[float] | None:
    """pgvector columns come back as '[0.1,0.2,...]' text."""
    if value is None:
        return None
    if isinstance(value, str):
        return [float(x) for x in json.loads(value)]
    return [float(x) for x in value]


class SupabaseStore:
    """
    Typed adapter over the marketplace schema.

    One instance is created at startup and shared by every service.
    The underlying AsyncClient multiplexes concurrent requests over its
    own connection pool.

    Example:
        store = await SupabaseStore.connect(settings)
        products, total = await store.list_products(ProductFilters(), limit=20, offset=0)
    """

    def __init__(self, client: AsyncClient):
        self._client = client

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @classmethod
    async def connect(cls, settings: Settings) -> SupabaseStore:
        """
        Create the client and verify the database answers.

        Raises:
            UpstreamUnavailableError: If the client can't be created or pinged
        """
        try:
            client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
        except Exception as e:
            raise UpstreamUnavailableError("Database", f"Failed to create Supabase client: {e}") from e

        store = cls(client)
        await store.ping()
        logger.info("Connected to Supabase")
        return store

    async def ping(self) -> None:
        await self._execute(
            self._client.table("categories").select("id").limit(1),
            "ping",
        )

    async def close(self) -> None:
        try:
            await self._client.postgrest.aclose()
        except httpx.HTTPError as e:
            logger.warning(f"Error closing Supabase client: {e}")

    # -------------------------------------------------------------------------
    # Query execution
    # -------------------------------------------------------------------------

    async def _execute(self, query, operation: str, errors: ErrorMap | None = None):
        """
        Run a PostgREST query and translate driver failures.

        Args:
            query: Built request (table/rpc builder)
            operation: Short name for logs
            errors: SQLSTATE -> factory for domain errors. A factory may
                return None to fall through to UpstreamUnavailableError.
        """
        try:
            return await query.execute()
        except APIError as e:
            if errors and e.code in errors:
                domain_error = errors[e.code](e)
                if domain_error is not None:
                    raise domain_error from e
            logger.error(f"Store operation '{operation}' failed: [{e.code}] {e.message}")
            raise UpstreamUnavailableError("Database", e.message) from e
        except httpx.HTTPError as e:
            logger.error(f"Store operation '{operation}' failed: {e}")
            raise UpstreamUnavailableError("Database", str(e)) from e

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def create_user(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a user row.

        Raises:
            DuplicateEmailError / DuplicateUsernameError: On unique violations
        """
        def _duplicate(e: APIError) -> Exception:
            text = f"{e.message} {e.details}"
            if "username" in text:
                return DuplicateUsernameError(data.get("username", ""))
            return DuplicateEmailError(data.get("email", ""))

        response = await self._execute(
            self._client.table("users").insert(_payload(data)),
            "create_user",
            errors={UNIQUE_VIOLATION: _duplicate},
        )
        return _first(response.data)

    async def get_user(self, user_id: str | UUID) -> dict[str, Any] | None:
        response = await self._execute(
            self._client.table("users").select("*").eq("id", normalize_uuid(user_id)).limit(1),
            "get_user",
        )
        return _first(response.data)

    async def find_user_by_email(self, email: str) -> dict[str, Any] | None:
        """Emails are stored lower-case, so an exact match is case-insensitive."""
        response = await self._execute(
            self._client.table("users").select("*").eq("email", email.strip().lower()).limit(1),
            "find_user_by_email",
        )
        return _first(response.data)

    async def find_user_by_username(self, username: str) -> dict[str, Any] | None:
        """Case-insensitive username lookup."""
        if not USERNAME_PATTERN.match(username):
            return None
        pattern = username.replace("\\", "\\\\").replace("_", "\\_")
        response = await self._execute(
            self._client.table("users").select("*").ilike("username", pattern).limit(1),
            "find_user_by_username",
        )
        return _first(response.data)

    async def update_user(self, user_id: str | UUID, changes: dict[str, Any]) -> dict[str, Any] | None:
        response = await self._execute(
            self._client.table("users").update(_payload(changes)).eq("id", normalize_uuid(user_id)),
            "update_user",
        )
        return _first(response.data)

    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------

    async def get_preferences(self, user_id: str | UUID) -> dict[str, Any] | None:
        response = await self._execute(
            self._client.table("user_preferences").select("*").eq("user_id", normalize_uuid(user_id)).limit(1),
            "get_preferences",
        )
        return _first(response.data)

    async def upsert_preferences(self, user_id: str | UUID, values: dict[str, Any]) -> dict[str, Any]:
        row = {**values, "user_id": normalize_uuid(user_id)}
        response = await self._execute(
            self._client.table("user_preferences").upsert(_payload(row), on_conflict="user_id"),
            "upsert_preferences",
        )
        return _first(response.data)

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    async def list_categories(self) -> list[dict[str, Any]]:
        response = await self._execute(
            self._client.table("categories").select("*").eq("is_active", True).order("name"),
            "list_categories",
        )
        return response.data or []

    async def get_category(self, category_id: str | UUID) -> dict[str, Any] | None:
        response = await self._execute(
            self._client.table("categories").select("*").eq("id", normalize_uuid(category_id)).limit(1),
            "get_category",
        )
        return _first(response.data)

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    async def create_product(self, data: dict[str, Any]) -> dict[str, Any]:
        response = await self._execute(
            self._client.table("products").insert(_payload(data)),
            "create_product",
        )
        return _first(response.data)

    async def get_product(self, product_id: str | UUID) -> dict[str, Any] | None:
        """Fetch a product that has not been soft-deleted."""
        response = await self._execute(
            self._client.table("products")
            .select("*")
            .eq("id", normalize_uuid(product_id))
            .is_("deleted_at", "null")
            .limit(1),
            "get_product",
        )
        return _first(response.data)

    async def update_product(self, product_id: str | UUID, changes: dict[str, Any]) -> dict[str, Any] | None:
        response = await self._execute(
            self._client.table("products")
            .update(_payload(changes))
            .eq("id", normalize_uuid(product_id))
            .is_("deleted_at", "null"),
            "update_product",
        )
        return _first(response.data)

    async def soft_delete_product(self, product_id: str | UUID) -> dict[str, Any] | None:
        return await self.update_product(
            product_id,
            {"is_active": False, "deleted_at": utcnow_iso()},
        )

    async def list_products(
        self,
        filters: ProductFilters,
        limit: int,
        offset: int,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List active products matching the filters.

        Returns:
            Tuple of (products, total matching count)
        """
        query = (
            self._client.table("products")
            .select("*", count="exact")
            .eq("is_active", True)
            .is_("deleted_at", "null")
        )

        if filters.category_id:
            query = query.eq("category_id", str(filters.category_id))
        if filters.seller_id:
            query = query.eq("seller_id", str(filters.seller_id))
        if filters.condition:
            query = query.eq("condition", filters.condition.value)
        if filters.min_price is not None:
            query = query.gte("price", str(filters.min_price))
        if filters.max_price is not None:
            query = query.lte("price", str(filters.max_price))
        if filters.tag:
            query = query.contains("tags", [filters.tag])

        if filters.sort == ProductSort.PRICE_ASC:
            query = query.order("price")
        elif filters.sort == ProductSort.PRICE_DESC:
            query = query.order("price", desc=True)
        else:
            query = query.order("created_at", desc=True)

        query = query.range(offset, offset + limit - 1)

        response = await self._execute(query, "list_products")
        return response.data or [], response.count or 0

    async def keyword_search(
        self,
        query_text: str,
        filters: ProductFilters,
        limit: int,
        offset: int,
    ) -> list[dict[str, Any]]:
        """Full-text search ranked by ts_rank; rows carry a `rank` column."""
        params = {
            "query_text": query_text,
            "category_filter": str(filters.category_id) if filters.category_id else None,
            "min_price": str(filters.min_price) if filters.min_price is not None else None,
            "max_price": str(filters.max_price) if filters.max_price is not None else None,
            "limit_results": limit,
            "offset_results": offset,
        }
        response = await self._execute(
            self._client.rpc("search_products_keyword", params),
            "keyword_search",
        )
        return response.data or []

    # -------------------------------------------------------------------------
    # Embeddings
    # -------------------------------------------------------------------------

    async def upsert_embedding(
        self,
        product_id: str | UUID,
        title_embedding: list[float],
        description_embedding: list[float] | None,
        combined_embedding: list[float],
    ) -> None:
        row = {
            "product_id": normalize_uuid(product_id),
            "title_embedding": title_embedding,
            "description_embedding": description_embedding,
            "combined_embedding": combined_embedding,
            "updated_at": utcnow_iso(),
        }
        await self._execute(
            self._client.table("product_embeddings").upsert(row, on_conflict="product_id"),
            "upsert_embedding",
        )

    async def get_embedding(self, product_id: str | UUID) -> list[float] | None:
        """Return the product's combined embedding, or None if not computed yet."""
        response = await self._execute(
            self._client.table("product_embeddings")
            .select("combined_embedding")
            .eq("product_id", normalize_uuid(product_id))
            .limit(1),
            "get_embedding",
        )
        row = _first(response.data)
        return _parse_vector(row.get("combined_embedding")) if row else None

    async def delete_embedding(self, product_id: str | UUID) -> None:
        await self._execute(
            self._client.table("product_embeddings").delete().eq("product_id", normalize_uuid(product_id)),
            "delete_embedding",
        )

    async def semantic_search(
        self,
        embedding: list[float],
        category_id: str | UUID | None,
        limit: int,
        offset: int,
        exclude_product_id: str | UUID | None = None,
    ) -> list[dict[str, Any]]:
        """
        Nearest neighbours by cosine distance over combined embeddings.

        Products without an embedding are never returned. Rows carry a
        `similarity` column (1 - cosine distance).
        """
        params = {
            "query_embedding": embedding,
            "category_filter": normalize_uuid(category_id) if category_id else None,
            "exclude_product": normalize_uuid(exclude_product_id) if exclude_product_id else None,
            "limit_results": limit,
            "offset_results": offset,
        }
        response = await self._execute(
            self._client.rpc("match_products", params),
            "semantic_search",
        )
        return response.data or []

    # -------------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------------

    async def create_review(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Raises:
            ConflictError: If the buyer already reviewed the product
        """
        response = await self._execute(
            self._client.table("reviews").insert(_payload(data)),
            "create_review",
            errors={UNIQUE_VIOLATION: lambda e: ConflictError(
                "You have already reviewed this product", code="DUPLICATE_REVIEW"
            )},
        )
        return _first(response.data)

    async def find_review(self, buyer_id: str | UUID, product_id: str | UUID) -> dict[str, Any] | None:
        response = await self._execute(
            self._client.table("reviews")
            .select("*")
            .eq("buyer_id", normalize_uuid(buyer_id))
            .eq("product_id", normalize_uuid(product_id))
            .limit(1),
            "find_review",
        )
        return _first(response.data)

    async def list_reviews(
        self,
        product_id: str | UUID,
        limit: int,
        offset: int,
    ) -> tuple[list[dict[str, Any]], int]:
        response = await self._execute(
            self._client.table("reviews")
            .select("*", count="exact")
            .eq("product_id", normalize_uuid(product_id))
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1),
            "list_reviews",
        )
        return response.data or [], response.count or 0

    async def has_purchased(self, buyer_id: str | UUID, product_id: str | UUID) -> bool:
        """True if the buyer has a paid/shipped/delivered order containing the product."""
        response = await self._execute(
            self._client.table("order_items")
            .select("id, orders!inner(buyer_id, status)")
            .eq("product_id", normalize_uuid(product_id))
            .eq("orders.buyer_id", normalize_uuid(buyer_id))
            .in_("orders.status", [status.value for status in PURCHASED_STATUSES])
            .limit(1),
            "has_purchased",
        )
        return bool(response.data)

    async def seller_ratings(self, seller_id: str | UUID) -> list[int]:
        response = await self._execute(
            self._client.table("reviews").select("rating").eq("seller_id", normalize_uuid(seller_id)),
            "seller_ratings",
        )
        return [row["rating"] for row in response.data or [] if row.get("rating") is not None]

    # -------------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------------

    async def add_cart_item(self, user_id: str | UUID, product_id: str | UUID, quantity: int) -> dict[str, Any]:
        """Insert or increment the (user, product) row in one statement."""
        response = await self._execute(
            self._client.rpc("add_to_cart", {
                "p_user_id": normalize_uuid(user_id),
                "p_product_id": normalize_uuid(product_id),
                "p_quantity": quantity,
            }),
            "add_cart_item",
        )
        return _first(response.data)

    async def get_cart_item(self, user_id: str | UUID, product_id: str | UUID) -> dict[str, Any] | None:
        response = await self._execute(
            self._client.table("cart")
            .select("*")
            .eq("user_id", normalize_uuid(user_id))
            .eq("product_id", normalize_uuid(product_id))
            .limit(1),
            "get_cart_item",
        )
        return _first(response.data)

    async def list_cart(self, user_id: str | UUID) -> list[dict[str, Any]]:
        """Cart rows with the current product row under `product`."""
        response = await self._execute(
            self._client.table("cart")
            .select("product_id, quantity, created_at, updated_at, products(*)")
            .eq("user_id", normalize_uuid(user_id))
            .order("created_at"),
            "list_cart",
        )
        rows = response.data or []
        for row in rows:
            row["product"] = row.pop("products", None)
        return rows

    async def set_cart_quantity(
        self,
        user_id: str | UUID,
        product_id: str | UUID,
        quantity: int,
    ) -> dict[str, Any] | None:
        response = await self._execute(
            self._client.table("cart")
            .update({"quantity": quantity})
            .eq("user_id", normalize_uuid(user_id))
            .eq("product_id", normalize_uuid(product_id)),
            "set_cart_quantity",
        )
        return _first(response.data)

    async def delete_cart_item(self, user_id: str | UUID, product_id: str | UUID) -> bool:
        response = await self._execute(
            self._client.table("cart")
            .delete()
            .eq("user_id", normalize_uuid(user_id))
            .eq("product_id", normalize_uuid(product_id)),
            "delete_cart_item",
        )
        return bool(response.data)

    async def delete_cart_items(self, user_id: str | UUID, product_ids: list[str | UUID]) -> None:
        if not product_ids:
            return
        await self._execute(
            self._client.table("cart")
            .delete()
            .eq("user_id", normalize_uuid(user_id))
            .in_("product_id", [normalize_uuid(pid) for pid in product_ids]),
            "delete_cart_items",
        )

    # -------------------------------------------------------------------------
    # Wishlist
    # -------------------------------------------------------------------------

    async def add_wishlist_item(self, user_id: str | UUID, product_id: str | UUID) -> dict[str, Any]:
        """
        Raises:
            AlreadyExistsError: If the pair is already on the wishlist
        """
        response = await self._execute(
            self._client.table("wishlist").insert({
                "user_id": normalize_uuid(user_id),
                "product_id": normalize_uuid(product_id),
            }),
            "add_wishlist_item",
            errors={UNIQUE_VIOLATION: lambda e: AlreadyExistsError("Wishlist item")},
        )
        return _first(response.data)

    async def list_wishlist(self, user_id: str | UUID) -> list[dict[str, Any]]:
        response = await self._execute(
            self._client.table("wishlist")
            .select("product_id, created_at, products(*)")
            .eq("user_id", normalize_uuid(user_id))
            .order("created_at", desc=True),
            "list_wishlist",
        )
        rows = response.data or []
        for row in rows:
            row["product"] = row.pop("products", None)
        return rows

    async def delete_wishlist_item(self, user_id: str | UUID, product_id: str | UUID) -> bool:
        response = await self._execute(
            self._client.table("wishlist")
            .delete()
            .eq("user_id", normalize_uuid(user_id))
            .eq("product_id", normalize_uuid(product_id)),
            "delete_wishlist_item",
        )
        return bool(response.data)

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    @staticmethod
    def _normalize_order(row: dict[str, Any]) -> dict[str, Any]:
        """Flatten embedded order_items(products(seller_id)) into `items`."""
        items = row.pop("order_items", None) or []
        for item in items:
            product = item.pop("products", None) or {}
            item["seller_id"] = product.get("seller_id")
        row["items"] = items
        return row

    async def place_order(self, order: dict[str, Any], items: list[dict[str, Any]]) -> dict[str, Any]:
        """
        Create an order and its items, decrementing stock, in one transaction.

        The stored function locks every product row, re-checks stock and
        aborts the whole transaction on the first shortfall.

        Raises:
            InsufficientStockError: If any line can't be fulfilled
        """
        def _stock(e: APIError) -> Exception | None:
            if e.message == "insufficient_stock":
                return InsufficientStockError(str(e.details or e.hint or "unknown"))
            return None

        response = await self._execute(
            self._client.rpc("place_order", {
                "p_order": _payload(order),
                "p_items": _payload(items),
            }),
            "place_order",
            errors={RAISE_EXCEPTION: _stock},
        )
        order_id = response.data
        if isinstance(order_id, list):
            order_id = order_id[0] if order_id else None
        if isinstance(order_id, dict):
            order_id = order_id.get("id") or order_id.get("place_order")
        return await self.get_order(order_id)

    async def get_order(self, order_id: str | UUID) -> dict[str, Any] | None:
        response = await self._execute(
            self._client.table("orders")
            .select("*, order_items(*, products(seller_id))")
            .eq("id", normalize_uuid(order_id))
            .limit(1),
            "get_order",
        )
        row = _first(response.data)
        return self._normalize_order(row) if row else None

    async def list_orders(
        self,
        user_id: str | UUID,
        limit: int,
        offset: int,
        as_seller: bool = False,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List a buyer's orders, or the orders containing a seller's products.

        Returns:
            Tuple of (orders newest first, total count)
        """
        user_id_str = normalize_uuid(user_id)
        if as_seller:
            query = (
                self._client.table("orders")
                .select("*, order_items!inner(*, products!inner(seller_id))", count="exact")
                .eq("order_items.products.seller_id", user_id_str)
            )
        else:
            query = (
                self._client.table("orders")
                .select("*, order_items(*, products(seller_id))", count="exact")
                .eq("buyer_id", user_id_str)
            )
        query = query.order("created_at", desc=True).range(offset, offset + limit - 1)

        response = await self._execute(query, "list_orders")
        return [self._normalize_order(row) for row in response.data or []], response.count or 0

    async def update_order_status(
        self,
        order_id: str | UUID,
        expected_status: OrderStatus,
        new_status: OrderStatus,
    ) -> dict[str, Any] | None:
        """
        Compare-and-set the order status.

        Returns None if the order no longer has `expected_status`.
        """
        response = await self._execute(
            self._client.table("orders")
            .update({"status": new_status.value})
            .eq("id", normalize_uuid(order_id))
            .eq("status", expected_status.value),
            "update_order_status",
        )
        if not response.data:
            return None
        return await self.get_order(order_id)

    async def cancel_order(self, order_id: str | UUID, expected_status: OrderStatus) -> dict[str, Any] | None:
        """
        Cancel an order, restock its items and refund a paid payment, atomically.

        Returns None if the order no longer has `expected_status`.
        """
        response = await self._execute(
            self._client.rpc("cancel_order", {
                "p_order_id": normalize_uuid(order_id),
                "p_expected_status": expected_status.value,
            }),
            "cancel_order",
        )
        if not response.data:
            return None
        return await self.get_order(order_id)

    async def record_payment(
        self,
        order_id: str | UUID,
        changes: dict[str, Any],
        expected_status: OrderStatus,
    ) -> dict[str, Any] | None:
        """
        Apply a payment outcome while payment_status is still pending.

        Returns None if the payment was already processed or the order
        status moved away from `expected_status`.
        """
        response = await self._execute(
            self._client.table("orders")
            .update(_payload(changes))
            .eq("id", normalize_uuid(order_id))
            .eq("status", expected_status.value)
            .eq("payment_status", PaymentStatus.PENDING.value),
            "record_payment",
        )
        if not response.data:
            return None
        return await self.get_order(order_id)

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    async def create_notification(self, data: dict[str, Any]) -> dict[str, Any]:
        response = await self._execute(
            self._client.table("notifications").insert(_payload(data)),
            "create_notification",
        )
        return _first(response.data)

    async def get_notification(self, notification_id: str | UUID) -> dict[str, Any] | None:
        response = await self._execute(
            self._client.table("notifications").select("*").eq("id", normalize_uuid(notification_id)).limit(1),
            "get_notification",
        )
        return _first(response.data)

    async def list_notifications(
        self,
        user_id: str | UUID,
        unread_only: bool,
        limit: int,
        offset: int,
    ) -> tuple[list[dict[str, Any]], int]:
        query = (
            self._client.table("notifications")
            .select("*", count="exact")
            .eq("user_id", normalize_uuid(user_id))
        )
        if unread_only:
            query = query.eq("is_read", False)
        query = query.order("created_at", desc=True).range(offset, offset + limit - 1)

        response = await self._execute(query, "list_notifications")
        return response.data or [], response.count or 0

    async def count_unread_notifications(self, user_id: str | UUID) -> int:
        response = await self._execute(
            self._client.table("notifications")
            .select("id", count="exact")
            .eq("user_id", normalize_uuid(user_id))
            .eq("is_read", False)
            .limit(1),
            "count_unread_notifications",
        )
        return response.count or 0

    async def update_notification(self, notification_id: str | UUID, changes: dict[str, Any]) -> dict[str, Any] | None:
        response = await self._execute(
            self._client.table("notifications").update(_payload(changes)).eq("id", normalize_uuid(notification_id)),
            "update_notification",
        )
        return _first(response.data)

    async def mark_all_notifications_read(self, user_id: str | UUID) -> int:
        response = await self._execute(
            self._client.table("notifications")
            .update({"is_read": True, "read_at": utcnow_iso()})
            .eq("user_id", normalize_uuid(user_id))
            .eq("is_read", False),
            "mark_all_notifications_read",
        )
        return len(response.data or [])

    async def delete_notification(self, notification_id: str | UUID) -> bool:
        response = await self._execute(
            self._client.table("notifications").delete().eq("id", normalize_uuid(notification_id)),
            "delete_notification",
        )
        return bool(response.data)
