"""Translate search filters into backend-neutral predicates, sort and paging."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Optional, Union

from .filters import DEFAULT_LIMIT, DEFAULT_PAGE, SearchFilters, finite_or_none

MAX_LIMIT = 100

TEXT_SEARCH_FIELDS = (
    "products.title",
    "products.crop_type",
    "products.variety",
    "products.description",
)

# Upper bound on available_from, in days from now.
AVAILABILITY_WINDOWS = {"now": 0, "week": 7, "month": 30}

# Lower bound on harvest_date, in days before now. Unknown buckets use 30.
HARVEST_WINDOWS = {"30days": 30, "3months": 90, "6months": 180}
DEFAULT_HARVEST_WINDOW = 30


@dataclass(frozen=True)
class Predicate:
    """One condition; ``ilike_any`` carries a tuple of fields OR'd together."""

    field: Union[str, tuple[str, ...]]
    op: str
    value: Any


@dataclass(frozen=True)
class SortDirective:
    field: str
    descending: bool = False


# "distance" and "rating" have no backend support and sort by recency.
RECENT_FIRST = SortDirective("products.created_at", descending=True)
SORT_DIRECTIVES = {
    "price_asc": SortDirective("products.price_per_unit"),
    "price_desc": SortDirective("products.price_per_unit", descending=True),
}


@dataclass
class SearchQuery:
    predicates: list[Predicate] = field(default_factory=list)
    sort: SortDirective = RECENT_FIRST
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def find(self, field_name, op: Optional[str] = None) -> Optional[Predicate]:
        """First predicate on ``field_name`` (and ``op`` when given)."""
        for predicate in self.predicates:
            if predicate.field == field_name and (op is None or predicate.op == op):
                return predicate
        return None


def _positive_int(value, default: int) -> int:
    value = finite_or_none(value)
    if value is None or value < 1:
        return default
    return int(value)


def build_search_query(
    filters: SearchFilters,
    now: Optional[datetime] = None,
    max_limit: int = MAX_LIMIT,
) -> SearchQuery:
    """
    Build the query for a buyer search.

    Radius is not part of the query: the database has no geo index, so
    distance is computed and filtered after the rows come back. Numbers that
    failed to parse (NaN) are left out.

    Args:
        filters: Parsed search filters
        now: Reference time for the availability and harvest windows
        max_limit: Upper bound applied to the page size

    Returns:
        SearchQuery with predicates, sort and pagination
    """
    now = now or datetime.utcnow()
    predicates = [
        Predicate("products.is_active", "eq", True),
        Predicate("products.quantity_available", "gt", 0),
    ]

    if filters.query:
        predicates.append(Predicate(TEXT_SEARCH_FIELDS, "ilike_any", filters.query))

    if filters.crop_types:
        predicates.append(Predicate("products.crop_type", "in", list(filters.crop_types)))

    if filters.quality_grades:
        predicates.append(Predicate("products.quality_grade", "in", list(filters.quality_grades)))

    min_price = finite_or_none(filters.min_price)
    if min_price is not None:
        predicates.append(Predicate("products.price_per_unit", "gte", min_price))

    max_price = finite_or_none(filters.max_price)
    if max_price is not None:
        predicates.append(Predicate("products.price_per_unit", "lte", max_price))

    state_id = finite_or_none(filters.state_id)
    if state_id is not None:
        predicates.append(Predicate("farmer_profiles.state_id", "eq", int(state_id)))

    lga_id = finite_or_none(filters.lga_id)
    if lga_id is not None:
        predicates.append(Predicate("farmer_profiles.lga_id", "eq", int(lga_id)))

    if filters.is_organic is True:
        predicates.append(Predicate("products.is_organic", "eq", True))

    if filters.availability in AVAILABILITY_WINDOWS:
        days = AVAILABILITY_WINDOWS[filters.availability]
        predicates.append(Predicate("products.available_from", "lte", now + timedelta(days=days)))

    if filters.harvest_date:
        days = HARVEST_WINDOWS.get(filters.harvest_date, DEFAULT_HARVEST_WINDOW)
        cutoff = (now - timedelta(days=days)).date()
        predicates.append(Predicate("products.harvest_date", "gte", cutoff))

    if filters.certifications:
        predicates.append(
            Predicate("farmer_profiles.certifications", "overlaps", list(filters.certifications))
        )

    return SearchQuery(
        predicates=predicates,
        sort=SORT_DIRECTIVES.get(filters.sort_by, RECENT_FIRST),
        page=_positive_int(filters.page, DEFAULT_PAGE),
        limit=min(_positive_int(filters.limit, DEFAULT_LIMIT), max_limit),
    )
