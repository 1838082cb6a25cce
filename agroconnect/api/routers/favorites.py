"""API endpoints for buyer favorites."""

from typing import Optional
from fastapi import APIRouter, Depends, Query

from ...auth import AuthUser
from ...database import get_engine
from ...marketplace.models import (
    FavoriteCreatedResponse, FavoriteListResponse, FavoriteRequest, MessageResponse,
)
from ...marketplace.service import FavoriteService
from ..security import get_current_user

router = APIRouter()

# Global engine (initialized on startup)
_engine = None


def get_favorite_service() -> FavoriteService:
    """Dependency to get favorite service."""
    global _engine
    if _engine is None:
        _engine = get_engine()
    return FavoriteService(_engine)


@router.get("", response_model=FavoriteListResponse, response_model_exclude_none=True)
async def list_favorites(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    user: AuthUser = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service),
):
    """List the buyer's favorited active products, newest first."""
    return await service.list_favorites(user.id, page=page, limit=limit)


@router.post("", response_model=FavoriteCreatedResponse, status_code=201)
async def add_favorite(
    data: Optional[FavoriteRequest] = None,
    user: AuthUser = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service),
):
    """
    Add a product to favorites.

    - 404 if the product is missing or inactive
    - 409 if it is already a favorite
    """
    return await service.add_favorite(user.id, data.product_id if data else None)


@router.delete("", response_model=MessageResponse)
async def remove_favorite(
    data: Optional[FavoriteRequest] = None,
    user: AuthUser = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service),
):
    """Remove a product from favorites."""
    return await service.remove_favorite(user.id, data.product_id if data else None)
