# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoint
# - users.py: Profile and preferences
# - products.py: Categories, products, similar products and reviews
# - search.py: Keyword and semantic search
# - cart.py: Cart and wishlist
# - orders.py: Orders and payments
# - notifications.py: In-app notifications
#
# Each router is mounted in main.py under the API prefix.
# =============================================================================

from . import health
from . import users
from . import products
from . import search
from . import cart
from . import orders
from . import notifications

__all__ = [
    "health",
    "users",
    "products",
    "search",
    "cart",
    "orders",
    "notifications",
]
