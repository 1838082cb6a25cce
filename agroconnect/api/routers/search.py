"""API endpoints for buyer product discovery."""

from fastapi import APIRouter, Depends, Request

from ...auth import AuthUser
from ...database import get_engine
from ...marketplace.models import ProductDetailResponse, SearchResponse
from ...marketplace.service import ProductService, SearchService
from ...search.filters import deserialize_filters, get_filter_options
from ..security import get_current_user

router = APIRouter()

# Global engine (initialized on startup)
_engine = None


def _shared_engine():
    global _engine
    if _engine is None:
        _engine = get_engine()
    return _engine


def get_search_service() -> SearchService:
    """Dependency to get search service."""
    return SearchService(_shared_engine())


def get_product_service() -> ProductService:
    """Dependency to get product service."""
    return ProductService(_shared_engine())


@router.get("/products/search", response_model=SearchResponse, response_model_exclude_none=True)
async def search_products(
    request: Request,
    user: AuthUser = Depends(get_current_user),
    service: SearchService = Depends(get_search_service),
):
    """
    Search active product listings.

    Query parameters: q, crop_types, quality_grades, certifications (comma
    separated), min_price, max_price, state_id, lga_id, radius, buyer_lat,
    buyer_lng, availability, harvest_date, is_organic, sort_by, page, limit.

    - Empty parameters are treated as absent
    - Distance is returned when buyer_lat and buyer_lng are given
    - radius drops results farther away, or with unknown distance
    - distance and rating sorts currently order by newest first
    """
    filters = deserialize_filters(request.query_params)
    return await service.search(filters)


@router.get("/filter-options")
async def filter_options():
    """Values the search filters accept, with display labels."""
    return get_filter_options()


@router.get("/products/{product_id}", response_model=ProductDetailResponse, response_model_exclude_none=True)
async def get_product(
    product_id: str,
    user: AuthUser = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    """
    Get an active product with related listings.

    - Distance uses the buyer profile's saved coordinates
    - Related products share the crop type but come from other farmers
    """
    return await service.get_product_detail(product_id, user.id)
