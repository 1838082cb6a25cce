"""Search filter value object, URL (de)serialization and validation."""

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Literal, Mapping, Optional, Union, get_args
from urllib.parse import parse_qsl, urlencode

from ..nigeria import (
    CERTIFICATIONS,
    CROP_VARIETIES,
    NIGERIAN_STATES,
    QUALITY_GRADES,
    SEARCH_CROP_TYPES,
    get_lgas_for_state,
    get_state_by_id,
)

Availability = Literal["now", "week", "month"]
HarvestWindow = Literal["30days", "3months", "6months"]
SortKey = Literal["price_asc", "price_desc", "distance", "rating", "date"]

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
DEFAULT_SORT = "date"

MIN_RADIUS_KM = 1
MAX_RADIUS_KM = 500

# Accepted values of the enumerated filters, by field.
CHOICES: dict[str, tuple[str, ...]] = {
    "availability": get_args(Availability),
    "harvest_date": get_args(HarvestWindow),
    "sort_by": get_args(SortKey),
}


@dataclass
class SearchFilters:
    """Buyer search filters, rebuilt from the query string on every request.

    Numbers parsed from malformed input are NaN; use ``validate_filters`` to
    catch them.
    """

    query: Optional[str] = None
    crop_types: Optional[list[str]] = None
    quality_grades: Optional[list[str]] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    state_id: Optional[int] = None
    lga_id: Optional[int] = None
    radius: Optional[float] = None
    buyer_lat: Optional[float] = None
    buyer_lng: Optional[float] = None
    availability: Optional[Availability] = None
    certifications: Optional[list[str]] = None
    harvest_date: Optional[HarvestWindow] = None
    is_organic: Optional[bool] = None
    sort_by: Optional[SortKey] = None
    page: Optional[int] = None
    limit: Optional[int] = None

    @property
    def has_buyer_location(self) -> bool:
        return finite_or_none(self.buyer_lat) is not None and finite_or_none(self.buyer_lng) is not None

    def as_dict(self) -> dict[str, Any]:
        """Set fields only, keyed by their camelCase names."""
        return {
            _camel(f.name): getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str]


# Filter field -> query string parameter
PARAM_NAMES: dict[str, str] = {f.name: f.name for f in fields(SearchFilters)}
PARAM_NAMES["query"] = "q"

LIST_FIELDS = ("crop_types", "quality_grades", "certifications")
FLOAT_FIELDS = ("min_price", "max_price", "radius", "buyer_lat", "buyer_lng")
INT_FIELDS = ("state_id", "lga_id", "page", "limit")
NUMERIC_FIELDS = FLOAT_FIELDS + INT_FIELDS


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def finite_or_none(value) -> Optional[float]:
    """The value if it is a usable number, otherwise None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _format_number(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _parse_float(raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        return math.nan


def _parse_int(raw: str):
    try:
        return int(raw)
    except ValueError:
        number = _parse_float(raw)
        if math.isfinite(number) and number.is_integer():
            return int(number)
        return math.nan


def _split_list(raw: str) -> list[str]:
    return [item for item in raw.split(",") if item]


def serialize_filters(filters: SearchFilters) -> dict[str, str]:
    """Flatten filters into query parameters, dropping empty and default values."""
    params: dict[str, str] = {}

    for f in fields(filters):
        value = getattr(filters, f.name)
        if value is None or value == "" or value == []:
            continue
        if f.name == "is_organic" and not value:
            continue
        if f.name == "page" and value == DEFAULT_PAGE:
            continue
        if f.name == "limit" and value == DEFAULT_LIMIT:
            continue
        if f.name == "sort_by" and value == DEFAULT_SORT:
            continue

        if f.name in LIST_FIELDS:
            params[PARAM_NAMES[f.name]] = ",".join(value)
        elif isinstance(value, bool):
            params[PARAM_NAMES[f.name]] = "true" if value else "false"
        elif f.name in NUMERIC_FIELDS:
            params[PARAM_NAMES[f.name]] = _format_number(value)
        else:
            params[PARAM_NAMES[f.name]] = str(value)

    return params


def deserialize_filters(params: Union[Mapping[str, str], str]) -> SearchFilters:
    """Rebuild filters from query parameters or a query string.

    Absent or empty parameters leave the field unset.
    """
    if isinstance(params, str):
        params = dict(parse_qsl(params.lstrip("?")))

    values: dict[str, Any] = {}
    for name, param in PARAM_NAMES.items():
        raw = params.get(param)
        if not raw:
            continue

        if name in LIST_FIELDS:
            values[name] = _split_list(raw)
        elif name in FLOAT_FIELDS:
            values[name] = _parse_float(raw)
        elif name in INT_FIELDS:
            values[name] = _parse_int(raw)
        elif name == "is_organic":
            if raw == "true":
                values[name] = True
        else:
            values[name] = raw

    return SearchFilters(**values)


def generate_search_url(filters: SearchFilters) -> str:
    """Query string for the filters, ``""`` when nothing is set."""
    params = serialize_filters(filters)
    return f"?{urlencode(params)}" if params else ""


def generate_shareable_url(base_url: str, filters: SearchFilters) -> str:
    return f"{base_url}{generate_search_url(filters)}"


def validate_filters(filters: SearchFilters) -> ValidationResult:
    """Check value ranges, collecting every violation."""
    errors: list[str] = []

    for name in NUMERIC_FIELDS:
        value = getattr(filters, name)
        if value is not None and finite_or_none(value) is None:
            errors.append(f"Invalid number for {PARAM_NAMES[name]}")

    min_price = finite_or_none(filters.min_price)
    max_price = finite_or_none(filters.max_price)
    radius = finite_or_none(filters.radius)
    lat = finite_or_none(filters.buyer_lat)
    lng = finite_or_none(filters.buyer_lng)

    if min_price is not None and max_price is not None and min_price > max_price:
        errors.append("Minimum price cannot be greater than maximum price")
    if min_price is not None and min_price < 0:
        errors.append("Minimum price cannot be negative")
    if max_price is not None and max_price < 0:
        errors.append("Maximum price cannot be negative")

    if radius is not None and not MIN_RADIUS_KM <= radius <= MAX_RADIUS_KM:
        errors.append("Search radius must be between 1 and 500 kilometers")

    if lat is not None and not -90 <= lat <= 90:
        errors.append("Invalid latitude value")
    if lng is not None and not -180 <= lng <= 180:
        errors.append("Invalid longitude value")

    for name in ("page", "limit"):
        value = finite_or_none(getattr(filters, name))
        if value is not None and value < 1:
            errors.append(f"{PARAM_NAMES[name]} must be at least 1")

    for name, choices in CHOICES.items():
        value = getattr(filters, name)
        if value is not None and value not in choices:
            errors.append(f"Invalid value for {PARAM_NAMES[name]}: {value}")

    if filters.quality_grades:
        invalid = [grade for grade in filters.quality_grades if grade not in QUALITY_GRADES]
        if invalid:
            errors.append(f"Invalid quality grades: {', '.join(invalid)}")

    state_id = finite_or_none(filters.state_id)
    if state_id is not None:
        if get_state_by_id(state_id) is None:
            errors.append("Invalid state selected")
        else:
            lga_id = finite_or_none(filters.lga_id)
            lgas = get_lgas_for_state(state_id)
            if lga_id is not None and lgas and all(lga.id != lga_id for lga in lgas):
                errors.append("Invalid LGA selected")

    return ValidationResult(is_valid=not errors, errors=errors)


def clear_filters() -> SearchFilters:
    return SearchFilters(page=DEFAULT_PAGE, limit=DEFAULT_LIMIT, sort_by=DEFAULT_SORT)


def clear_filter(filters: SearchFilters, name: str) -> SearchFilters:
    """Unset one filter and go back to the first page."""
    if name not in PARAM_NAMES:
        raise ValueError(f"Unknown filter: {name}")
    return replace(filters, **{name: None, "page": DEFAULT_PAGE})


def merge_filters(base: SearchFilters, **changes) -> SearchFilters:
    return replace(base, **{**changes, "page": DEFAULT_PAGE})


def get_active_filter_count(filters: SearchFilters) -> int:
    # Price bounds count once, as do state and LGA.
    checks = [
        filters.query,
        filters.crop_types,
        filters.quality_grades,
        filters.min_price or filters.max_price,
        filters.state_id or filters.lga_id,
        filters.radius,
        filters.availability,
        filters.certifications,
        filters.harvest_date,
        filters.is_organic,
    ]
    return sum(1 for check in checks if check)


def get_filter_summary(filters: SearchFilters) -> str:
    parts: list[str] = []

    if filters.query:
        parts.append(f'"{filters.query}"')
    if filters.crop_types:
        count = len(filters.crop_types)
        parts.append(f"{count} crop type{'s' if count > 1 else ''}")
    if filters.quality_grades:
        count = len(filters.quality_grades)
        parts.append(f"{count} quality grade{'s' if count > 1 else ''}")
    if filters.min_price or filters.max_price:
        parts.append("price range")
    if filters.state_id:
        parts.append("location filter")
    if filters.radius:
        parts.append("distance filter")
    if filters.availability:
        parts.append("availability filter")
    if filters.certifications:
        parts.append("certifications")
    if filters.harvest_date:
        parts.append("harvest date")
    if filters.is_organic:
        parts.append("organic only")

    return ", ".join(parts) if parts else "All products"


def is_default_filters(filters: SearchFilters) -> bool:
    return get_active_filter_count(filters) == 0 and (filters.sort_by or DEFAULT_SORT) == DEFAULT_SORT


def get_filter_options() -> dict[str, Any]:
    return {
        "cropTypes": list(SEARCH_CROP_TYPES),
        "cropVarieties": {crop: list(varieties) for crop, varieties in CROP_VARIETIES.items()},
        "qualityGrades": list(QUALITY_GRADES),
        "availability": [
            {"value": "now", "label": "Available Now"},
            {"value": "week", "label": "This Week"},
            {"value": "month", "label": "This Month"},
        ],
        "certifications": list(CERTIFICATIONS),
        "harvestDate": [
            {"value": "30days", "label": "Last 30 Days"},
            {"value": "3months", "label": "Last 3 Months"},
            {"value": "6months", "label": "Last 6 Months"},
        ],
        "sortOptions": [
            {"value": "price_asc", "label": "Price: Low to High"},
            {"value": "price_desc", "label": "Price: High to Low"},
            {"value": "distance", "label": "Distance"},
            {"value": "date", "label": "Harvest Date"},
            {"value": "rating", "label": "Farmer Rating"},
        ],
        "radiusOptions": [
            {"value": km, "label": f"Within {km}km"}
            for km in (10, 25, 50, 100, 250, 500)
        ],
        "states": [
            {"id": state.id, "name": state.name, "code": state.code}
            for state in NIGERIAN_STATES
        ],
    }
