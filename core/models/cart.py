# =============================================================================
# core/models/cart.py - Cart and Wishlist Schemas
# =============================================================================
# Cart rows are unique per (user, product) and carry a quantity.
# Wishlist rows are unique per (user, product) and carry nothing else.
# =============================================================================

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class CartAdd(BaseModel):
    product_id: UUID
    quantity: int = Field(default=1, ge=1, le=10000)


class CartUpdate(BaseModel):
    """New absolute quantity. Anything below 1 removes the item."""
    quantity: int = Field(..., le=10000)


class CartItemResponse(BaseModel):
    product_id: UUID
    quantity: int
    unit_price: Decimal | None = None
    subtotal: Decimal | None = None
    product: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CartResponse(BaseModel):
    items: list[CartItemResponse]
    item_count: int
    total: Decimal


class WishlistItemResponse(BaseModel):
    product_id: UUID
    product: dict[str, Any] | None = None
    created_at: datetime | None = None


class WishlistResponse(BaseModel):
    items: list[WishlistItemResponse]
