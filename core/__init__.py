# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for data validation and the order status tables
# - services/: Accounts, catalog, search, cart, orders and notifications
#
# Services raise app.exceptions types and never build HTTP responses.
# Services talk to storage only through the adapters in lib/.
# =============================================================================
