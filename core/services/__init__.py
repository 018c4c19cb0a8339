# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .auth_service import AuthService
from .cart_service import CartService
from .notification_service import NotificationService
from .order_service import OrderService
from .product_service import ProductService
from .search_service import SearchService
from .user_service import UserService

__all__ = [
    "AuthService",
    "CartService",
    "NotificationService",
    "OrderService",
    "ProductService",
    "SearchService",
    "UserService",
]
