# =============================================================================
# core/models/product.py - Catalog Schemas
# =============================================================================
# These models define the API contract for products, categories, reviews
# and search:
# - ProductCreate / ProductUpdate: seller inputs (price and stock >= 0)
# - ProductFilters: listing/search predicates
# - ProductResponse / ProductSearchResult: outputs
# - ReviewCreate / ReviewResponse
# - SemanticSearchRequest / SearchResponse
# =============================================================================

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProductCondition(str, Enum):
    NEW = "new"
    USED = "used"
    REFURBISHED = "refurbished"


class ProductSort(str, Enum):
    """Listing order. Newest first unless the caller asks otherwise."""
    NEWEST = "newest"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"


class SearchMode(str, Enum):
    """Which ranking produced a search response."""
    KEYWORD = "keyword"
    SEMANTIC = "semantic"


# =============================================================================
# Categories
# =============================================================================

class CategoryResponse(BaseModel):
    id: UUID
    name: str
    slug: str
    description: str | None = None
    parent_id: UUID | None = None
    icon: str | None = None
    color: str | None = None


# =============================================================================
# Products
# =============================================================================

class ProductCreate(BaseModel):
    """
    Schema for listing a new product.

    Example:
        {
            "title": "Mechanical keyboard",
            "price": "10.00",
            "stock_quantity": 5,
            "condition": "new"
        }
    """
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=20000)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$")
    condition: ProductCondition = ProductCondition.NEW
    stock_quantity: int = Field(default=0, ge=0)
    category_id: UUID | None = None
    sku: str | None = Field(default=None, max_length=100)
    tags: list[str] = Field(default_factory=list, max_length=50)
    images: list[dict[str, Any]] = Field(default_factory=list)
    specifications: dict[str, Any] = Field(default_factory=dict)
    dimensions: dict[str, Any] | None = None
    shipping_info: dict[str, Any] | None = None


class ProductUpdate(BaseModel):
    """Partial update. Only fields that are sent are changed."""
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=20000)
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    currency: str | None = Field(default=None, pattern=r"^[A-Z]{3}$")
    condition: ProductCondition | None = None
    stock_quantity: int | None = Field(default=None, ge=0)
    category_id: UUID | None = None
    sku: str | None = Field(default=None, max_length=100)
    tags: list[str] | None = Field(default=None, max_length=50)
    images: list[dict[str, Any]] | None = None
    specifications: dict[str, Any] | None = None
    dimensions: dict[str, Any] | None = None
    shipping_info: dict[str, Any] | None = None
    is_active: bool | None = None


class ProductFilters(BaseModel):
    """
    Predicates shared by listing and keyword search.

    Active, non-deleted products only; that part is not optional.
    """
    category_id: UUID | None = None
    seller_id: UUID | None = None
    condition: ProductCondition | None = None
    min_price: Decimal | None = Field(default=None, ge=0)
    max_price: Decimal | None = Field(default=None, ge=0)
    tag: str | None = None
    sort: ProductSort = ProductSort.NEWEST


class ProductResponse(BaseModel):
    id: UUID
    seller_id: UUID
    category_id: UUID | None = None
    title: str
    description: str | None = None
    price: Decimal
    currency: str = "USD"
    condition: ProductCondition = ProductCondition.NEW
    stock_quantity: int = 0
    sku: str | None = None
    tags: list[str] | None = None
    images: list[dict[str, Any]] | None = None
    specifications: dict[str, Any] | None = None
    dimensions: dict[str, Any] | None = None
    shipping_info: dict[str, Any] | None = None
    is_featured: bool = False
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductList(BaseModel):
    products: list[ProductResponse]
    total: int
    limit: int
    offset: int


class ProductSearchResult(ProductResponse):
    """A product plus the score that ranked it (rank or similarity)."""
    score: float | None = None


# =============================================================================
# Search
# =============================================================================

class SemanticSearchRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=500)
    category_id: UUID | None = None
    limit: int = Field(default=10, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class SearchResponse(BaseModel):
    query: str
    mode: SearchMode
    results: list[ProductSearchResult]
    limit: int
    offset: int


# =============================================================================
# Reviews
# =============================================================================

class ReviewCreate(BaseModel):
    """
    Schema for reviewing a product.

    The rating range is enforced by the product service so that an
    out-of-range value is reported as INVALID_RATING.
    """
    rating: int
    title: str | None = Field(default=None, max_length=255)
    comment: str | None = Field(default=None, max_length=5000)


class ReviewResponse(BaseModel):
    id: UUID
    product_id: UUID
    buyer_id: UUID
    seller_id: UUID
    rating: int
    title: str | None = None
    comment: str | None = None
    is_verified_purchase: bool = False
    helpful_votes: int = 0
    created_at: datetime | None = None


class ReviewList(BaseModel):
    reviews: list[ReviewResponse]
    total: int
    limit: int
    offset: int
