# =============================================================================
# core/services/cart_service.py - Cart and Wishlist Business Logic
# =============================================================================
# Both collections hold at most one row per (user, product).
# Adding to the cart again increments that row's quantity; adding to the
# wishlist again is a no-op.
# =============================================================================

import logging
from decimal import Decimal
from typing import Any
from uuid import UUID

from app.exceptions import AlreadyExistsError, NotFoundError, ValidationFailedError
from lib.supabase_client import SupabaseStore
from lib.utils import to_money

logger = logging.getLogger(__name__)


def _is_available(product: dict[str, Any] | None) -> bool:
    return bool(product) and product.get("is_active", True) and not product.get("deleted_at")


def _cart_item(row: dict[str, Any]) -> dict[str, Any]:
    """Attach current unit price and subtotal to a cart row."""
    product = row.get("product")
    item = {
        "product_id": row["product_id"],
        "quantity": row["quantity"],
        "product": product,
        "unit_price": None,
        "subtotal": None,
        "created_at": row.get("created_at"),
        "updated_at": row.get("updated_at"),
    }
    if _is_available(product):
        unit_price = to_money(product["price"])
        item["unit_price"] = unit_price
        item["subtotal"] = unit_price * row["quantity"]
    return item


class CartService:
    """
    Service for a user's cart and wishlist.
    """

    def __init__(self, store: SupabaseStore):
        self.store = store

    async def _get_available_product(self, product_id: str | UUID) -> dict[str, Any]:
        product = await self.store.get_product(product_id)
        if not _is_available(product):
            raise NotFoundError("Product", str(product_id))
        return product

    # -------------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------------

    async def add_to_cart(
        self,
        user_id: str | UUID,
        product_id: str | UUID,
        quantity: int = 1,
    ) -> dict[str, Any]:
        """
        Add a product to the cart, incrementing the quantity if already there.

        Raises:
            ValidationFailedError: If quantity < 1
            NotFoundError: If the product doesn't exist or isn't active
        """
        if quantity < 1:
            raise ValidationFailedError("Quantity must be at least 1")

        product = await self._get_available_product(product_id)
        row = await self.store.add_cart_item(user_id, product_id, quantity)

        logger.debug(f"Cart {user_id}: +{quantity} x {product_id} (now {row['quantity']})")
        return _cart_item({**row, "product": product})

    async def update_cart_item(
        self,
        user_id: str | UUID,
        product_id: str | UUID,
        quantity: int,
    ) -> dict[str, Any] | None:
        """
        Set an item's quantity. A quantity below 1 removes the item.

        Returns:
            The updated item, or None if it was removed

        Raises:
            NotFoundError: If the product isn't in the cart
        """
        if not await self.store.get_cart_item(user_id, product_id):
            raise NotFoundError("Cart item", str(product_id))

        if quantity < 1:
            await self.store.delete_cart_item(user_id, product_id)
            return None

        row = await self.store.set_cart_quantity(user_id, product_id, quantity)
        if not row:
            raise NotFoundError("Cart item", str(product_id))
        product = await self.store.get_product(product_id)
        return _cart_item({**row, "product": product})

    async def remove_from_cart(self, user_id: str | UUID, product_id: str | UUID) -> None:
        if not await self.store.delete_cart_item(user_id, product_id):
            raise NotFoundError("Cart item", str(product_id))

    async def get_cart(self, user_id: str | UUID) -> dict[str, Any]:
        """
        The cart with current prices.

        Items whose product has since been deactivated stay in the cart but
        carry no price and don't count toward the total.
        """
        items = [_cart_item(row) for row in await self.store.list_cart(user_id)]
        total = sum((item["subtotal"] for item in items if item["subtotal"] is not None), Decimal("0.00"))
        return {
            "items": items,
            "item_count": sum(item["quantity"] for item in items),
            "total": to_money(total),
        }

    # -------------------------------------------------------------------------
    # Wishlist
    # -------------------------------------------------------------------------

    async def add_to_wishlist(self, user_id: str | UUID, product_id: str | UUID) -> None:
        """Add a product to the wishlist. Adding it twice is not an error."""
        await self._get_available_product(product_id)
        try:
            await self.store.add_wishlist_item(user_id, product_id)
        except AlreadyExistsError:
            logger.debug(f"Product {product_id} already on wishlist of {user_id}")

    async def remove_from_wishlist(self, user_id: str | UUID, product_id: str | UUID) -> None:
        if not await self.store.delete_wishlist_item(user_id, product_id):
            raise NotFoundError("Wishlist item", str(product_id))

    async def get_wishlist(self, user_id: str | UUID) -> dict[str, Any]:
        return {"items": await self.store.list_wishlist(user_id)}
