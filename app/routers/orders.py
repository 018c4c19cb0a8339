# =============================================================================
# app/routers/orders.py - Order Endpoints
# =============================================================================
# Endpoints:
# - GET  /api/v1/orders               - My orders (role=seller: orders for my products)
# - POST /api/v1/orders               - Place an order
# - GET  /api/v1/orders/{id}          - Order detail (buyer or seller)
# - PUT  /api/v1/orders/{id}/status   - Move through the lifecycle
# - POST /api/v1/orders/{id}/payment  - Record the buyer's payment outcome
# =============================================================================

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.auth import CurrentUser
from app.dependencies import OrderServiceDep
from core.models.order import OrderCreate, OrderList, OrderResponse, OrderStatusUpdate, PaymentRequest

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get("", response_model=OrderList)
async def list_orders(
    user: CurrentUser,
    orders: OrderServiceDep,
    role: Literal["buyer", "seller"] = "buyer",
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
):
    rows, total = await orders.list_orders(user.id, limit, offset, as_seller=role == "seller")
    return OrderList(orders=rows, total=total, limit=limit, offset=offset)


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(body: OrderCreate, user: CurrentUser, orders: OrderServiceDep):
    """
    Place an order. All lines succeed or none do.

    Raises:
        404: A product doesn't exist
        409: Insufficient stock for any line
    """
    return await orders.create_order(
        user.id,
        body.items,
        shipping_address=body.shipping_address,
        payment_method=body.payment_method,
        notes=body.notes,
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: UUID, user: CurrentUser, orders: OrderServiceDep):
    return await orders.get_order(order_id, user.id)


@router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    body: OrderStatusUpdate,
    user: CurrentUser,
    orders: OrderServiceDep,
):
    """
    Raises:
        403: Your role can't make this change
        409: Transition not allowed from the current status
    """
    return await orders.update_order_status(order_id, user.id, body.status)


@router.post("/{order_id}/payment", response_model=OrderResponse)
async def process_payment(
    order_id: UUID,
    body: PaymentRequest,
    user: CurrentUser,
    orders: OrderServiceDep,
):
    return await orders.process_payment(order_id, user.id, body)
