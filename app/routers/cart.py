# =============================================================================
# app/routers/cart.py - Cart and Wishlist Endpoints
# =============================================================================
# Endpoints:
# - GET    /api/v1/cart                  - Cart with current prices and total
# - POST   /api/v1/cart                  - Add (or increment) a product
# - PUT    /api/v1/cart/{product_id}     - Set quantity (< 1 removes)
# - DELETE /api/v1/cart/{product_id}     - Remove a product
# - GET    /api/v1/wishlist              - Wishlist
# - POST   /api/v1/wishlist/{product_id} - Add a product (idempotent)
# - DELETE /api/v1/wishlist/{product_id} - Remove a product
# =============================================================================

from uuid import UUID

from fastapi import APIRouter, status

from app.auth import CurrentUser
from app.dependencies import CartServiceDep
from core.models.cart import CartAdd, CartItemResponse, CartResponse, CartUpdate, WishlistResponse

router = APIRouter(tags=["Cart"])


@router.get("/cart", response_model=CartResponse)
async def get_cart(user: CurrentUser, cart: CartServiceDep):
    return await cart.get_cart(user.id)


@router.post("/cart", response_model=CartItemResponse, status_code=status.HTTP_201_CREATED)
async def add_to_cart(body: CartAdd, user: CurrentUser, cart: CartServiceDep):
    return await cart.add_to_cart(user.id, body.product_id, body.quantity)


@router.put("/cart/{product_id}", response_model=CartResponse)
async def update_cart_item(product_id: UUID, body: CartUpdate, user: CurrentUser, cart: CartServiceDep):
    """Returns the whole cart, so a removal (quantity < 1) shows up as a missing item."""
    await cart.update_cart_item(user.id, product_id, body.quantity)
    return await cart.get_cart(user.id)


@router.delete("/cart/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_cart(product_id: UUID, user: CurrentUser, cart: CartServiceDep):
    await cart.remove_from_cart(user.id, product_id)


@router.get("/wishlist", response_model=WishlistResponse)
async def get_wishlist(user: CurrentUser, cart: CartServiceDep):
    return await cart.get_wishlist(user.id)


@router.post("/wishlist/{product_id}", response_model=WishlistResponse, status_code=status.HTTP_201_CREATED)
async def add_to_wishlist(product_id: UUID, user: CurrentUser, cart: CartServiceDep):
    await cart.add_to_wishlist(user.id, product_id)
    return await cart.get_wishlist(user.id)


@router.delete("/wishlist/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_wishlist(product_id: UUID, user: CurrentUser, cart: CartServiceDep):
    await cart.remove_from_wishlist(user.id, product_id)
