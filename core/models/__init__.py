# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - user.py: Registration, login, tokens, profile and preferences
# - product.py: Products, categories, reviews and search
# - cart.py: Cart and wishlist
# - order.py: Orders, payments and their status machines
# - notification.py: In-app notifications
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# User Models - Accounts and preferences
# -----------------------------------------------------------------------------
from .user import (
    AccessTokenResponse,
    PreferencesResponse,
    PreferencesUpdate,
    ProfileUpdate,
    RefreshRequest,
    Theme,
    TokenPair,
    UserLogin,
    UserRegister,
    UserResponse,
    VerificationLevel,
)

# -----------------------------------------------------------------------------
# Product Models - Catalog, reviews, search
# -----------------------------------------------------------------------------
from .product import (
    CategoryResponse,
    ProductCondition,
    ProductCreate,
    ProductFilters,
    ProductList,
    ProductResponse,
    ProductSearchResult,
    ProductSort,
    ProductUpdate,
    ReviewCreate,
    ReviewList,
    ReviewResponse,
    SearchMode,
    SearchResponse,
    SemanticSearchRequest,
)

# -----------------------------------------------------------------------------
# Cart Models
# -----------------------------------------------------------------------------
from .cart import (
    CartAdd,
    CartItemResponse,
    CartResponse,
    CartUpdate,
    WishlistItemResponse,
    WishlistResponse,
)

# -----------------------------------------------------------------------------
# Order Models
# -----------------------------------------------------------------------------
from .order import (
    OrderCreate,
    OrderItemCreate,
    OrderItemResponse,
    OrderList,
    OrderResponse,
    OrderStatus,
    OrderStatusUpdate,
    PaymentRequest,
    PaymentStatus,
    can_transition,
    can_transition_payment,
)

# -----------------------------------------------------------------------------
# Notification Models
# -----------------------------------------------------------------------------
from .notification import (
    NotificationList,
    NotificationResponse,
    NotificationType,
)

# -----------------------------------------------------------------------------
# __all__ - Explicit public API
# -----------------------------------------------------------------------------
__all__ = [
    # User
    "AccessTokenResponse",
    "PreferencesResponse",
    "PreferencesUpdate",
    "ProfileUpdate",
    "RefreshRequest",
    "Theme",
    "TokenPair",
    "UserLogin",
    "UserRegister",
    "UserResponse",
    "VerificationLevel",
    # Product
    "CategoryResponse",
    "ProductCondition",
    "ProductCreate",
    "ProductFilters",
    "ProductList",
    "ProductResponse",
    "ProductSearchResult",
    "ProductSort",
    "ProductUpdate",
    "ReviewCreate",
    "ReviewList",
    "ReviewResponse",
    "SearchMode",
    "SearchResponse",
    "SemanticSearchRequest",
    # Cart
    "CartAdd",
    "CartItemResponse",
    "CartResponse",
    "CartUpdate",
    "WishlistItemResponse",
    "WishlistResponse",
    # Order
    "OrderCreate",
    "OrderItemCreate",
    "OrderItemResponse",
    "OrderList",
    "OrderResponse",
    "OrderStatus",
    "OrderStatusUpdate",
    "PaymentRequest",
    "PaymentStatus",
    "can_transition",
    "can_transition_payment",
    # Notification
    "NotificationList",
    "NotificationResponse",
    "NotificationType",
]
