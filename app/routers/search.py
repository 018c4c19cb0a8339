# =============================================================================
# app/routers/search.py - Search Endpoints
# =============================================================================
# Endpoints:
# - GET  /api/v1/search?q=...       - Keyword (full-text) search
# - POST /api/v1/search/semantic    - Meaning-based search; reports the mode
#                                     actually used (keyword on fallback)
# =============================================================================

from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Query

from app.auth import CurrentUser
from app.dependencies import SearchServiceDep
from core.models.product import ProductFilters, SearchMode, SearchResponse, SemanticSearchRequest

router = APIRouter(prefix="/search", tags=["Search"])


@router.get("", response_model=SearchResponse)
async def keyword_search(
    user: CurrentUser,
    search: SearchServiceDep,
    q: str = Query(..., min_length=1, max_length=500, description="Search text"),
    category_id: UUID | None = None,
    min_price: Decimal | None = Query(default=None, ge=0),
    max_price: Decimal | None = Query(default=None, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
):
    filters = ProductFilters(category_id=category_id, min_price=min_price, max_price=max_price)
    results = await search.keyword_search(q, filters, limit, offset, user_id=user.id)
    return SearchResponse(query=q, mode=SearchMode.KEYWORD, results=results, limit=limit, offset=offset)


@router.post("/semantic", response_model=SearchResponse)
async def semantic_search(body: SemanticSearchRequest, user: CurrentUser, search: SearchServiceDep):
    results, mode = await search.semantic_search(
        body.query,
        category_id=body.category_id,
        limit=body.limit,
        offset=body.offset,
        user_id=user.id,
    )
    return SearchResponse(query=body.query, mode=mode, results=results, limit=body.limit, offset=body.offset)
