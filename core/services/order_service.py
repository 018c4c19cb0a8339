# =============================================================================
# core/services/order_service.py - Order and Payment Business Logic
# =============================================================================
# Order placement is all-or-nothing: the store's place_order runs inside a
# single transaction, so a shortfall on any line leaves every stock level
# unchanged.
#
# Who may move an order:
#   buyer   -> cancelled (from pending or paid), and pays via process_payment
#   seller  -> paid, shipped, delivered, cancelled
#
# Status writes are compare-and-set against the status that was read, so
# two concurrent updates can't both succeed.
# =============================================================================

import logging
from decimal import Decimal
from typing import Any
from uuid import UUID

from app.exceptions import (
    ConflictError,
    ForbiddenError,
    InsufficientStockError,
    InvalidTransitionError,
    NotFoundError,
    UpstreamUnavailableError,
    ValidationFailedError,
)
from core.models.notification import NotificationType
from core.models.order import (
    OrderItemCreate,
    OrderStatus,
    PaymentRequest,
    PaymentStatus,
    can_transition,
    can_transition_payment,
)
from core.services.notification_service import NotificationService
from lib.supabase_client import SupabaseStore
from lib.utils import normalize_uuid, to_money

logger = logging.getLogger(__name__)


def _seller_ids(order: dict[str, Any]) -> set[str]:
    return {str(item["seller_id"]) for item in order.get("items", []) if item.get("seller_id")}


def _concurrent_update(order_id: str | UUID) -> ConflictError:
    return ConflictError(
        f"Order {order_id} was modified by another request",
        code="CONCURRENT_UPDATE",
        suggestion="Reload the order and try again",
    )


class OrderService:
    """
    Service for placing orders, moving them through their lifecycle and
    recording payments.
    """

    def __init__(self, store: SupabaseStore, notifications: NotificationService):
        self.store = store
        self.notifications = notifications

    # -------------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------------

    async def create_order(
        self,
        buyer_id: str | UUID,
        items: list[OrderItemCreate],
        shipping_address: dict[str, Any] | None = None,
        payment_method: str | None = None,
        notes: str | None = None,
    ) -> dict[str, Any]:
        """
        Place an order for one or more products.

        Lines for the same product are merged. Prices are snapshotted from
        the current product rows.

        Raises:
            ValidationFailedError: Empty order or mixed currencies
            NotFoundError: If a product doesn't exist or isn't active
            ForbiddenError: If the buyer is the seller of a product
            InsufficientStockError: If any line exceeds available stock
        """
        if not items:
            raise ValidationFailedError("An order needs at least one item")

        quantities: dict[str, int] = {}
        for item in items:
            product_id = normalize_uuid(item.product_id)
            quantities[product_id] = quantities.get(product_id, 0) + item.quantity

        lines: list[dict[str, Any]] = []
        sellers: set[str] = set()
        currency: str | None = None
        total = Decimal("0.00")

        for product_id, quantity in quantities.items():
            product = await self.store.get_product(product_id)
            if not product or not product.get("is_active", True):
                raise NotFoundError("Product", product_id)
            if str(product["seller_id"]) == str(buyer_id):
                raise ForbiddenError("You cannot order your own product")

            available = product.get("stock_quantity", 0)
            if available < quantity:
                raise InsufficientStockError(product_id, quantity, available)

            product_currency = product.get("currency") or "USD"
            if currency is None:
                currency = product_currency
            elif product_currency != currency:
                raise ValidationFailedError(
                    "All items in an order must use the same currency",
                    code="MIXED_CURRENCY",
                )

            price = to_money(product["price"])
            line_total = price * quantity
            total += line_total
            sellers.add(str(product["seller_id"]))
            lines.append({
                "product_id": product_id,
                "quantity": quantity,
                "price": price,
                "total_price": line_total,
            })

        order = await self.store.place_order(
            {
                "buyer_id": normalize_uuid(buyer_id),
                "status": OrderStatus.PENDING.value,
                "payment_status": PaymentStatus.PENDING.value,
                "total_amount": to_money(total),
                "currency": currency,
                "shipping_address": shipping_address,
                "payment_method": payment_method,
                "notes": notes,
            },
            lines,
        )
        logger.info(f"Placed order {order['id']} for buyer {buyer_id}: {len(lines)} lines, total {total}")

        try:
            await self.store.delete_cart_items(buyer_id, list(quantities))
        except UpstreamUnavailableError as e:
            logger.warning(f"Order {order['id']} placed but cart cleanup failed: {e.message}")

        for seller_id in sellers:
            await self.notifications.notify(
                seller_id,
                NotificationType.ORDER_PLACED,
                "New order",
                f"Order {order['id']} includes your products",
                {"order_id": str(order["id"])},
            )

        return order

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get_order(self, order_id: str | UUID, user_id: str | UUID) -> dict[str, Any]:
        """
        Raises:
            NotFoundError: If the order doesn't exist
            ForbiddenError: If the user is neither the buyer nor a seller on it
        """
        order = await self.store.get_order(order_id)
        if not order:
            raise NotFoundError("Order", str(order_id))

        user_id = str(user_id)
        if str(order["buyer_id"]) != user_id and user_id not in _seller_ids(order):
            raise ForbiddenError("You do not have access to this order")
        return order

    async def list_orders(
        self,
        user_id: str | UUID,
        limit: int = 20,
        offset: int = 0,
        as_seller: bool = False,
    ) -> tuple[list[dict[str, Any]], int]:
        """Orders the user placed, or with as_seller the orders containing their products."""
        return await self.store.list_orders(user_id, limit, offset, as_seller=as_seller)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def update_order_status(
        self,
        order_id: str | UUID,
        user_id: str | UUID,
        new_status: OrderStatus,
    ) -> dict[str, Any]:
        """
        Move an order to a new status.

        Cancelling restores stock for every item and refunds a paid payment
        in the same transaction.

        Raises:
            InvalidTransitionError: If new_status isn't reachable from the current
                one, or is paid (only process_payment gets there)
            ForbiddenError: If the user's role can't make this change
            ConflictError: If the order changed concurrently
        """
        order = await self.get_order(order_id, user_id)
        current = OrderStatus(order["status"])

        if not can_transition(current, new_status):
            raise InvalidTransitionError("status", current.value, new_status.value)
        # Only a recorded payment moves an order to paid
        if new_status == OrderStatus.PAID:
            raise InvalidTransitionError(
                "status", current.value, new_status.value,
                suggestion="Record the buyer's payment with POST /orders/{id}/payment",
            )

        is_buyer = str(order["buyer_id"]) == str(user_id)
        is_seller = str(user_id) in _seller_ids(order)
        if new_status != OrderStatus.CANCELLED and not is_seller:
            raise ForbiddenError(f"Only the seller can mark an order as {new_status.value}")

        if new_status == OrderStatus.CANCELLED:
            updated = await self.store.cancel_order(order_id, current)
        else:
            updated = await self.store.update_order_status(order_id, current, new_status)
        if updated is None:
            raise _concurrent_update(order_id)

        logger.info(f"Order {order_id}: {current.value} -> {new_status.value} by {user_id}")

        data = {"order_id": str(order_id), "status": new_status.value}
        await self.notifications.notify(
            order["buyer_id"],
            NotificationType.ORDER_STATUS,
            "Order update",
            f"Your order is now {new_status.value}",
            data,
        )
        if new_status == OrderStatus.CANCELLED and is_buyer:
            for seller_id in _seller_ids(order):
                await self.notifications.notify(
                    seller_id,
                    NotificationType.ORDER_STATUS,
                    "Order cancelled",
                    f"Order {order_id} was cancelled by the buyer",
                    data,
                )

        return updated

    async def process_payment(
        self,
        order_id: str | UUID,
        user_id: str | UUID,
        payment: PaymentRequest,
    ) -> dict[str, Any]:
        """
        Record the outcome of the buyer's payment.

        Approved: payment -> paid, escrow holds the order total and the
        order moves pending -> paid. Declined: payment -> failed.

        Raises:
            NotFoundError: If the order doesn't exist
            ForbiddenError: If the user isn't the buyer
            InvalidTransitionError: If the payment was already processed or
                the order can no longer be paid
        """
        order = await self.store.get_order(order_id)
        if not order:
            raise NotFoundError("Order", str(order_id))
        if str(order["buyer_id"]) != str(user_id):
            raise ForbiddenError("Only the buyer can pay for this order")

        current_payment = PaymentStatus(order["payment_status"])
        target = PaymentStatus.PAID if payment.approved else PaymentStatus.FAILED
        if not can_transition_payment(current_payment, target):
            raise InvalidTransitionError("payment_status", current_payment.value, target.value)

        current_status = OrderStatus(order["status"])
        if current_status != OrderStatus.PENDING:
            raise InvalidTransitionError("status", current_status.value, OrderStatus.PAID.value)

        changes: dict[str, Any] = {
            "payment_status": target.value,
            "payment_method": payment.payment_method,
            "transaction_id": payment.transaction_id,
        }
        if payment.approved:
            changes["status"] = OrderStatus.PAID.value
            changes["escrow_amount"] = to_money(order["total_amount"])

        updated = await self.store.record_payment(order_id, changes, current_status)
        if updated is None:
            raise _concurrent_update(order_id)

        logger.info(f"Order {order_id}: payment {target.value}")

        await self.notifications.notify(
            order["buyer_id"],
            NotificationType.PAYMENT,
            "Payment received" if payment.approved else "Payment failed",
            f"Payment for order {order_id} {'succeeded' if payment.approved else 'was declined'}",
            {"order_id": str(order_id), "payment_status": target.value},
        )
        if payment.approved:
            for seller_id in _seller_ids(order):
                await self.notifications.notify(
                    seller_id,
                    NotificationType.PAYMENT,
                    "Order paid",
                    f"Order {order_id} has been paid and is ready to ship",
                    {"order_id": str(order_id)},
                )

        return updated
