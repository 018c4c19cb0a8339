# =============================================================================
# app/routers/products.py - Catalog Endpoints
# =============================================================================
# Endpoints:
# - GET    /api/v1/categories              - Active categories
# - GET    /api/v1/products                - List/filter products (public)
# - POST   /api/v1/products                - List a product for sale
# - GET    /api/v1/products/{id}           - Product detail (records a view)
# - PUT    /api/v1/products/{id}           - Update (seller only)
# - DELETE /api/v1/products/{id}           - Soft delete (seller only)
# - GET    /api/v1/products/{id}/similar   - Semantically similar products
# - GET    /api/v1/products/{id}/reviews   - Reviews, newest first
# - POST   /api/v1/products/{id}/reviews   - Review a product
#
# Embeddings are (re)computed after the response is sent whenever a
# product is created or its text changes.
# =============================================================================

from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Query, status

from app.auth import CurrentUser, OptionalUser
from app.dependencies import ProductServiceDep, SearchServiceDep, UserServiceDep
from core.models.product import (
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
)

router = APIRouter(tags=["Products"])

# Product fields that feed the combined embedding
EMBEDDED_FIELDS = {"title", "description", "tags"}


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(products: ProductServiceDep):
    return await products.list_categories()


@router.get("/products", response_model=ProductList)
async def list_products(
    products: ProductServiceDep,
    category_id: UUID | None = None,
    seller_id: UUID | None = None,
    condition: ProductCondition | None = None,
    min_price: Decimal | None = Query(default=None, ge=0),
    max_price: Decimal | None = Query(default=None, ge=0),
    tag: str | None = None,
    sort: ProductSort = ProductSort.NEWEST,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
):
    """List active products, newest first unless `sort` says otherwise."""
    filters = ProductFilters(
        category_id=category_id,
        seller_id=seller_id,
        condition=condition,
        min_price=min_price,
        max_price=max_price,
        tag=tag,
        sort=sort,
    )
    rows, total = await products.list_products(filters, limit, offset)
    return ProductList(products=rows, total=total, limit=limit, offset=offset)


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate,
    user: CurrentUser,
    products: ProductServiceDep,
    search: SearchServiceDep,
    background_tasks: BackgroundTasks,
):
    product = await products.create(user.id, body)
    background_tasks.add_task(search.refresh_embedding, product)
    return product


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: UUID,
    user: OptionalUser,
    products: ProductServiceDep,
    users: UserServiceDep,
    background_tasks: BackgroundTasks,
):
    """Public. When the caller is logged in the view goes into their browsing history."""
    product = await products.get(product_id)
    if user:
        background_tasks.add_task(users.record_view, user.id, product_id)
    return product


@router.put("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: UUID,
    body: ProductUpdate,
    user: CurrentUser,
    products: ProductServiceDep,
    search: SearchServiceDep,
    background_tasks: BackgroundTasks,
):
    product = await products.update(product_id, user.id, body)
    if EMBEDDED_FIELDS & body.model_fields_set:
        background_tasks.add_task(search.refresh_embedding, product)
    return product


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: UUID, user: CurrentUser, products: ProductServiceDep):
    await products.delete(product_id, user.id)


@router.get("/products/{product_id}/similar", response_model=list[ProductSearchResult])
async def similar_products(
    product_id: UUID,
    user: CurrentUser,
    search: SearchServiceDep,
    limit: int = Query(default=10, ge=1, le=50),
):
    return await search.similar_products(product_id, limit)


# =============================================================================
# Reviews
# =============================================================================

@router.get("/products/{product_id}/reviews", response_model=ReviewList)
async def list_reviews(
    product_id: UUID,
    products: ProductServiceDep,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
):
    rows, total = await products.list_reviews(product_id, limit, offset)
    return ReviewList(reviews=rows, total=total, limit=limit, offset=offset)


@router.post(
    "/products/{product_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_review(
    product_id: UUID,
    body: ReviewCreate,
    user: CurrentUser,
    products: ProductServiceDep,
):
    """
    Raises:
        400: Rating outside 1..5
        403: Reviewing your own product
        409: Already reviewed
    """
    return await products.create_review(product_id, user.id, body)
