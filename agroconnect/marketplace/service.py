"""Marketplace service layer: buyer search, product detail and favorites."""

from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import select, func, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from ..config import marketplace_config
from ..database import get_session
from ..errors import BackendFailure, Conflict, NotFound, ValidationFailure
from ..logging_config import get_logger
from ..search.filters import DEFAULT_SORT, SearchFilters, finite_or_none, validate_filters
from ..search.query import build_search_query
from ..search.results import GeoPoint, apply_radius_filter, format_search_result, format_search_results
from .models import (
    BuyerFavoriteORM, BuyerProfileORM, ProductORM,
    FavoriteCreatedResponse, FavoriteItem, FavoriteListResponse, FavoriteRecord,
    MessageResponse, Pagination, ProductDetailResponse, SearchResponse,
)
from .queries import apply_predicates, apply_sort_and_page, base_product_select

logger = get_logger(__name__)


@contextmanager
def backend_errors(message: str):
    """Log database errors and re-raise them as a generic BackendFailure."""
    try:
        yield
    except SQLAlchemyError:
        logger.exception(message)
        raise BackendFailure(message)


def _buyer_location(buyer: Optional[BuyerProfileORM]) -> Optional[GeoPoint]:
    if buyer is None or buyer.latitude is None or buyer.longitude is None:
        return None
    return GeoPoint(buyer.latitude, buyer.longitude)


class SearchService:
    """Runs buyer product searches."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def search(self, filters: SearchFilters, now: Optional[datetime] = None) -> SearchResponse:
        """
        Search active listings.

        The radius is applied after distances are computed for the fetched
        page, so ``pagination.total`` is the count before that filter.

        Raises:
            ValidationFailure: filter values are out of range or malformed
            BackendFailure: the database query failed
        """
        validation = validate_filters(filters)
        if not validation.is_valid:
            raise ValidationFailure("Invalid search filters", validation.errors)

        query = build_search_query(filters, now=now, max_limit=marketplace_config.max_page_size)
        statement = apply_predicates(base_product_select(), query)

        with backend_errors("Failed to fetch products"):
            async with get_session(self.engine) as session:
                count_result = await session.execute(
                    select(func.count()).select_from(statement.subquery())
                )
                total = count_result.scalar() or 0

                result = await session.execute(apply_sort_and_page(statement, query))
                rows = result.scalars().all()

        buyer_location = None
        if filters.has_buyer_location:
            buyer_location = GeoPoint(filters.buyer_lat, filters.buyer_lng)

        products = format_search_results(rows, buyer_location)
        products = apply_radius_filter(products, finite_or_none(filters.radius), buyer_location)

        logger.debug("Search matched %d products, %d on page after radius", total, len(products))

        echoed = replace(
            filters,
            page=query.page,
            limit=query.limit,
            sort_by=filters.sort_by or DEFAULT_SORT,
        )
        return SearchResponse(
            products=products,
            pagination=Pagination.build(query.page, query.limit, total),
            filters=echoed.as_dict(),
        )


class ProductService:
    """Buyer-facing product detail."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def get_product_detail(self, product_id: str, user_id: str) -> ProductDetailResponse:
        """Active product with distance from the buyer and up to four related listings."""
        with backend_errors("Failed to fetch product"):
            async with get_session(self.engine) as session:
                buyer = await _find_buyer(session, user_id)

                result = await session.execute(
                    select(ProductORM)
                    .where(ProductORM.id == product_id)
                    .where(ProductORM.is_active.is_(True))
                )
                product = result.scalar_one_or_none()
                if not product:
                    raise NotFound("Product not found")

                related_result = await session.execute(
                    select(ProductORM)
                    .where(ProductORM.crop_type == product.crop_type)
                    .where(ProductORM.is_active.is_(True))
                    .where(ProductORM.id != product.id)
                    .where(ProductORM.farmer_id != product.farmer_id)
                    .order_by(ProductORM.created_at.desc())
                    .limit(marketplace_config.related_products_limit)
                )
                related = related_result.scalars().all()

        location = _buyer_location(buyer)
        return ProductDetailResponse(
            product=format_search_result(product, location),
            related_products=format_search_results(related, location),
        )


async def _find_buyer(session: AsyncSession, user_id: str) -> Optional[BuyerProfileORM]:
    result = await session.execute(
        select(BuyerProfileORM).where(BuyerProfileORM.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def _require_buyer(session: AsyncSession, user_id: str) -> BuyerProfileORM:
    buyer = await _find_buyer(session, user_id)
    if not buyer:
        raise NotFound("Buyer profile not found")
    return buyer


class FavoriteService:
    """Buyer favorites."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def list_favorites(self, user_id: str, page: int = 1, limit: Optional[int] = None) -> FavoriteListResponse:
        """Favorites on active products, newest first."""
        limit = min(limit or marketplace_config.default_page_size, marketplace_config.max_page_size)

        with backend_errors("Failed to fetch favorites"):
            async with get_session(self.engine) as session:
                buyer = await _require_buyer(session, user_id)

                statement = (
                    select(BuyerFavoriteORM)
                    .join(BuyerFavoriteORM.product)
                    .where(BuyerFavoriteORM.buyer_id == buyer.id)
                    .where(ProductORM.is_active.is_(True))
                )
                count_result = await session.execute(
                    select(func.count()).select_from(statement.subquery())
                )
                total = count_result.scalar() or 0

                result = await session.execute(
                    statement
                    .order_by(BuyerFavoriteORM.created_at.desc(), BuyerFavoriteORM.id)
                    .offset((page - 1) * limit)
                    .limit(limit)
                )
                favorites = result.scalars().all()

        location = _buyer_location(buyer)
        return FavoriteListResponse(
            favorites=[
                FavoriteItem(
                    id=fav.id,
                    product_id=fav.product_id,
                    created_at=fav.created_at,
                    product=format_search_result(fav.product, location),
                )
                for fav in favorites
            ],
            pagination=Pagination.build(page, limit, total),
        )

    async def add_favorite(self, user_id: str, product_id: Optional[str]) -> FavoriteCreatedResponse:
        """
        Favorite an active product.

        Raises:
            ValidationFailure: no product id given
            NotFound: buyer profile or active product missing
            Conflict: product already favorited
        """
        if not product_id:
            raise ValidationFailure("Product ID is required")

        with backend_errors("Failed to add to favorites"):
            try:
                async with get_session(self.engine) as session:
                    buyer = await _require_buyer(session, user_id)

                    result = await session.execute(
                        select(ProductORM.id)
                        .where(ProductORM.id == product_id)
                        .where(ProductORM.is_active.is_(True))
                    )
                    if result.scalar_one_or_none() is None:
                        raise NotFound("Product not found or inactive")

                    existing = await session.execute(
                        select(BuyerFavoriteORM.id)
                        .where(BuyerFavoriteORM.buyer_id == buyer.id)
                        .where(BuyerFavoriteORM.product_id == product_id)
                    )
                    if existing.scalar_one_or_none() is not None:
                        raise Conflict("Product already in favorites")

                    favorite = BuyerFavoriteORM(
                        id=str(uuid4()),
                        buyer_id=buyer.id,
                        product_id=product_id,
                        created_at=datetime.utcnow(),
                    )
                    session.add(favorite)
                    await session.flush()
            except IntegrityError:
                # Lost a race with a concurrent insert of the same favorite.
                raise Conflict("Product already in favorites")

        get_logger(__name__, {"buyer_id": buyer.id}).info("Product %s added to favorites", product_id)
        return FavoriteCreatedResponse(
            message="Product added to favorites",
            favorite=FavoriteRecord.model_validate(favorite),
        )

    async def remove_favorite(self, user_id: str, product_id: Optional[str]) -> MessageResponse:
        """Remove a favorite; removing one that does not exist still succeeds."""
        if not product_id:
            raise ValidationFailure("Product ID is required")

        with backend_errors("Failed to remove from favorites"):
            async with get_session(self.engine) as session:
                buyer = await _require_buyer(session, user_id)
                await session.execute(
                    delete(BuyerFavoriteORM)
                    .where(BuyerFavoriteORM.buyer_id == buyer.id)
                    .where(BuyerFavoriteORM.product_id == product_id)
                )

        get_logger(__name__, {"buyer_id": buyer.id}).info("Product %s removed from favorites", product_id)
        return MessageResponse(message="Product removed from favorites")
