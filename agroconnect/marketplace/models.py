"""Marketplace data models."""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from sqlalchemy import (
    Column, String, Float, Integer, DateTime, Date, Text, Boolean, JSON,
    ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import relationship, declarative_base

from ..search.results import SearchResult

Base = declarative_base()


# ============ SQLAlchemy ORM Models ============

class StateORM(Base):
    """SQLAlchemy model for states table."""
    __tablename__ = "states"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    code = Column(String(2), unique=True, nullable=False)


class LgaORM(Base):
    """SQLAlchemy model for lgas table."""
    __tablename__ = "lgas"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    state_id = Column(Integer, ForeignKey("states.id"), index=True, nullable=False)


class ProfileORM(Base):
    """SQLAlchemy model for profiles table, keyed by the auth provider's user id."""
    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    user_type = Column(String, nullable=False, default="buyer")
    full_name = Column(String, nullable=False)
    phone = Column(String)
    is_verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class FarmerProfileORM(Base):
    """SQLAlchemy model for farmer_profiles table."""
    __tablename__ = "farmer_profiles"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("profiles.id"), unique=True, nullable=False)
    farm_name = Column(String)
    state_id = Column(Integer, ForeignKey("states.id"), index=True)
    lga_id = Column(Integer, ForeignKey("lgas.id"), index=True)
    address = Column(String)
    latitude = Column(Float)
    longitude = Column(Float)
    rating = Column(Float)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("ProfileORM", lazy="selectin")
    state = relationship("StateORM", lazy="selectin")
    lga = relationship("LgaORM", lazy="selectin")
    certifications = relationship(
        "FarmerCertificationORM", lazy="selectin", cascade="all, delete-orphan"
    )


class FarmerCertificationORM(Base):
    """SQLAlchemy model for farmer_certifications table."""
    __tablename__ = "farmer_certifications"
    __table_args__ = (UniqueConstraint("farmer_id", "name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    farmer_id = Column(String, ForeignKey("farmer_profiles.id"), index=True, nullable=False)
    name = Column(String, nullable=False)


class BuyerProfileORM(Base):
    """SQLAlchemy model for buyer_profiles table."""
    __tablename__ = "buyer_profiles"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("profiles.id"), unique=True, nullable=False)
    company_name = Column(String, nullable=False)
    company_type = Column(String)
    state_id = Column(Integer, ForeignKey("states.id"))
    lga_id = Column(Integer, ForeignKey("lgas.id"))
    latitude = Column(Float)
    longitude = Column(Float)
    created_at = Column(DateTime, default=datetime.utcnow)


class ProductORM(Base):
    """SQLAlchemy model for products table."""
    __tablename__ = "products"

    id = Column(String, primary_key=True)
    farmer_id = Column(String, ForeignKey("farmer_profiles.id"), index=True, nullable=False)
    title = Column(String, nullable=False)
    crop_type = Column(String, index=True, nullable=False)
    variety = Column(String)
    quantity_available = Column(Float, nullable=False, default=0)
    unit = Column(String, nullable=False)
    price_per_unit = Column(Float, nullable=False)
    quality_grade = Column(String)
    harvest_date = Column(Date)
    available_from = Column(DateTime, default=datetime.utcnow)
    available_until = Column(DateTime)
    description = Column(Text)
    storage_method = Column(String)
    is_organic = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    images = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    farmer_profile = relationship("FarmerProfileORM", lazy="selectin")


class BuyerFavoriteORM(Base):
    """SQLAlchemy model for buyer_favorites table."""
    __tablename__ = "buyer_favorites"
    __table_args__ = (UniqueConstraint("buyer_id", "product_id"),)

    id = Column(String, primary_key=True)
    buyer_id = Column(String, ForeignKey("buyer_profiles.id"), index=True, nullable=False)
    product_id = Column(String, ForeignKey("products.id"), index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    product = relationship("ProductORM", lazy="selectin")


# ============ Pydantic Models (API) ============

class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, total_pages=-(-total // limit))


class SearchResponse(ApiModel):
    """Schema for buyer search results.

    ``pagination.total`` counts matches before the radius filter.
    """
    products: list[SearchResult]
    pagination: Pagination
    filters: dict[str, Any] = Field(default_factory=dict)


class ProductDetailResponse(ApiModel):
    """Schema for a single product with related listings."""
    product: SearchResult
    related_products: list[SearchResult] = Field(default_factory=list)


class FavoriteRequest(ApiModel):
    """Body of favorite add/remove requests."""
    product_id: Optional[str] = None


class FavoriteRecord(ApiModel):
    id: str
    buyer_id: str
    product_id: str
    created_at: datetime

    class Config:
        from_attributes = True


class FavoriteItem(ApiModel):
    id: str
    product_id: str
    created_at: datetime
    product: SearchResult


class FavoriteListResponse(ApiModel):
    favorites: list[FavoriteItem]
    pagination: Pagination


class FavoriteCreatedResponse(ApiModel):
    message: str
    favorite: FavoriteRecord


class MessageResponse(ApiModel):
    message: str
