# =============================================================================
# core/models/order.py - Order Schemas and Status Machines
# =============================================================================
# An order carries two independent status fields:
#
#   status:          pending -> paid -> shipped -> delivered
#                    pending | paid -> cancelled
#
#   payment_status:  pending -> paid | failed
#                    paid -> refunded
#
# Order items are an immutable snapshot of product id, unit price and
# quantity taken when the order was created.
# =============================================================================

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PAID, PaymentStatus.FAILED}),
    PaymentStatus.PAID: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.FAILED: frozenset(),
    PaymentStatus.REFUNDED: frozenset(),
}

# Orders in these states count as a completed purchase (verified reviews)
PURCHASED_STATUSES = (OrderStatus.PAID, OrderStatus.SHIPPED, OrderStatus.DELIVERED)


def can_transition(current: OrderStatus | str, new: OrderStatus | str) -> bool:
    """Check whether the order status table allows current -> new."""
    return OrderStatus(new) in ORDER_TRANSITIONS[OrderStatus(current)]


def can_transition_payment(current: PaymentStatus | str, new: PaymentStatus | str) -> bool:
    """Check whether the payment status table allows current -> new."""
    return PaymentStatus(new) in PAYMENT_TRANSITIONS[PaymentStatus(current)]


# =============================================================================
# Inputs
# =============================================================================

class OrderItemCreate(BaseModel):
    product_id: UUID
    quantity: int = Field(..., ge=1, le=10000)


class OrderCreate(BaseModel):
    """
    Schema for placing an order.

    Example:
        {
            "items": [{"product_id": "550e8400-...", "quantity": 3}],
            "shipping_address": {"line1": "1 Main St", "city": "Springfield"}
        }
    """
    items: list[OrderItemCreate] = Field(..., min_length=1, max_length=100)
    shipping_address: dict[str, Any] | None = None
    payment_method: str | None = Field(default=None, max_length=50)
    notes: str | None = Field(default=None, max_length=2000)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class PaymentRequest(BaseModel):
    """
    Result of the external payment step, reported by the client.

    No money moves here: approved=True records the payment as paid,
    approved=False records it as failed.
    """
    payment_method: str = Field(..., min_length=1, max_length=50)
    transaction_id: str | None = Field(default=None, max_length=255)
    approved: bool = True


# =============================================================================
# Outputs
# =============================================================================

class OrderItemResponse(BaseModel):
    id: UUID | None = None
    product_id: UUID
    quantity: int
    price: Decimal
    total_price: Decimal


class OrderResponse(BaseModel):
    id: UUID
    buyer_id: UUID
    status: OrderStatus
    payment_status: PaymentStatus
    total_amount: Decimal
    currency: str = "USD"
    escrow_amount: Decimal = Decimal("0.00")
    escrow_fee: Decimal = Decimal("0.00")
    shipping_address: dict[str, Any] | None = None
    payment_method: str | None = None
    transaction_id: str | None = None
    notes: str | None = None
    items: list[OrderItemResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderList(BaseModel):
    orders: list[OrderResponse]
    total: int
    limit: int
    offset: int
