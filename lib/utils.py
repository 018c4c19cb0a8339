# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from uuid import UUID

CENT = Decimal("0.01")


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Args:
        value: UUID as string or UUID object

    Returns:
        String representation of the UUID

    Example:
        product_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        product_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Money Utilities
# =============================================================================

def to_money(value: Any) -> Decimal:
    """
    Convert a numeric store value to a two-decimal Decimal.

    PostgREST returns NUMERIC columns as JSON numbers, so floats go through
    str() first to avoid binary rounding artifacts.

    Example:
        to_money(10)      # Decimal("10.00")
        to_money(19.99)   # Decimal("19.99")
        to_money("7.5")   # Decimal("7.50")
    """
    if isinstance(value, Decimal):
        amount = value
    else:
        amount = Decimal(str(value if value is not None else 0))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


# =============================================================================
# Time Utilities
# =============================================================================

def utcnow_iso() -> str:
    """Current UTC time as an ISO-8601 string, ready to write to the store."""
    return datetime.now(timezone.utc).isoformat()
