"""Shape joined product rows into buyer-facing search results."""

import re
from datetime import date, datetime
from typing import Any, Iterable, NamedTuple, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from .geo import calculate_distance


class GeoPoint(NamedTuple):
    lat: float
    lng: float


# ============ Raw row shapes (product + farmer + location join) ============

class RowModel(BaseModel):
    """Accepts plain dicts as well as ORM objects."""

    class Config:
        from_attributes = True


class NamedRef(RowModel):
    name: Optional[str] = None


class ProfileRow(RowModel):
    id: Optional[str] = None
    full_name: Optional[str] = None
    is_verified: Optional[bool] = None


class FarmerRow(RowModel):
    id: Optional[str] = None
    user_id: Optional[str] = None
    farm_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    rating: Optional[float] = None
    certifications: list[str] = Field(default_factory=list)
    state: Optional[NamedRef] = None
    lga: Optional[NamedRef] = None
    user: Optional[ProfileRow] = None

    @field_validator("certifications", mode="before")
    @classmethod
    def _certification_names(cls, value):
        if value is None:
            return []
        return [getattr(item, "name", item) for item in value]

    @property
    def location(self) -> Optional[GeoPoint]:
        if self.latitude is None or self.longitude is None:
            return None
        return GeoPoint(self.latitude, self.longitude)


class ProductRow(RowModel):
    id: str
    title: str
    crop_type: str
    variety: Optional[str] = None
    price_per_unit: float
    quantity_available: float
    unit: str
    quality_grade: Optional[str] = None
    is_organic: Optional[bool] = None
    harvest_date: Optional[date] = None
    available_from: Optional[datetime] = None
    available_until: Optional[datetime] = None
    description: Optional[str] = None
    images: Optional[list[str]] = None
    storage_method: Optional[str] = None
    farmer_profile: Optional[FarmerRow] = None


# ============ Display DTOs ============

class ResultModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True


class FarmerSummary(ResultModel):
    id: str = ""
    name: str = "Unknown Farmer"
    farm_name: Optional[str] = None
    rating: float = 0
    is_verified: bool = False
    state: str = ""
    lga: str = ""


class SearchResult(ResultModel):
    """One product as shown in buyer search results."""

    id: str
    title: str
    crop_type: str
    variety: Optional[str] = None
    price_per_unit: float
    quantity_available: float
    unit: str
    quality_grade: Optional[str] = None
    is_organic: bool = False
    harvest_date: Optional[date] = None
    available_from: Optional[datetime] = None
    available_until: Optional[datetime] = None
    description: Optional[str] = None
    images: list[str] = Field(default_factory=list)
    distance: Optional[float] = Field(None, description="Kilometers from the buyer, when known")
    farmer: FarmerSummary = Field(default_factory=FarmerSummary)
    certifications: list[str] = Field(default_factory=list)
    storage_method: Optional[str] = None


def _farmer_summary(farmer: Optional[FarmerRow]) -> FarmerSummary:
    if farmer is None:
        return FarmerSummary()

    user = farmer.user or ProfileRow()
    return FarmerSummary(
        id=farmer.user_id or "",
        name=user.full_name or "Unknown Farmer",
        farm_name=farmer.farm_name,
        rating=farmer.rating or 0,
        is_verified=bool(user.is_verified),
        state=(farmer.state.name if farmer.state else None) or "",
        lga=(farmer.lga.name if farmer.lga else None) or "",
    )


def format_search_result(row: Any, buyer_location: Optional[GeoPoint] = None) -> SearchResult:
    """Format one joined row; ``row`` may be a dict, ORM object or ProductRow."""
    product = ProductRow.model_validate(row)
    farmer = product.farmer_profile

    distance = None
    farmer_location = farmer.location if farmer else None
    if buyer_location is not None and farmer_location is not None:
        distance = calculate_distance(
            buyer_location.lat, buyer_location.lng,
            farmer_location.lat, farmer_location.lng,
        )

    return SearchResult(
        id=product.id,
        title=product.title,
        crop_type=product.crop_type,
        variety=product.variety,
        price_per_unit=product.price_per_unit,
        quantity_available=product.quantity_available,
        unit=product.unit,
        quality_grade=product.quality_grade,
        is_organic=bool(product.is_organic),
        harvest_date=product.harvest_date,
        available_from=product.available_from,
        available_until=product.available_until,
        description=product.description,
        images=product.images or [],
        distance=distance,
        farmer=_farmer_summary(farmer),
        certifications=farmer.certifications if farmer else [],
        storage_method=product.storage_method,
    )


def format_search_results(
    rows: Iterable[Any], buyer_location: Optional[GeoPoint] = None
) -> list[SearchResult]:
    """Format joined rows in order, attaching distance when it can be computed."""
    return [format_search_result(row, buyer_location) for row in rows]


def apply_radius_filter(
    results: list[SearchResult],
    radius: Optional[float],
    buyer_location: Optional[GeoPoint],
) -> list[SearchResult]:
    """Keep results within ``radius`` km; results without a distance are dropped."""
    if radius is None or buyer_location is None:
        return results
    return [
        result for result in results
        if result.distance is not None and result.distance <= radius
    ]


def highlight_search_terms(text: str, query: str) -> str:
    """Wrap case-insensitive matches of ``query`` in ``<mark>`` tags."""
    if not query or not text:
        return text
    pattern = re.compile(f"({re.escape(query)})", re.IGNORECASE)
    return pattern.sub(r"<mark>\1</mark>", text)
