"""Buyer product search: filters, query building, distance and result formatting."""

from .filters import (
    SearchFilters,
    ValidationResult,
    clear_filters,
    deserialize_filters,
    generate_search_url,
    get_filter_options,
    serialize_filters,
    validate_filters,
)
from .geo import calculate_distance
from .query import Predicate, SearchQuery, SortDirective, build_search_query
from .results import (
    GeoPoint,
    SearchResult,
    apply_radius_filter,
    format_search_results,
    highlight_search_terms,
)

__all__ = [
    "SearchFilters",
    "ValidationResult",
    "clear_filters",
    "deserialize_filters",
    "generate_search_url",
    "get_filter_options",
    "serialize_filters",
    "validate_filters",
    "calculate_distance",
    "Predicate",
    "SearchQuery",
    "SortDirective",
    "build_search_query",
    "GeoPoint",
    "SearchResult",
    "apply_radius_filter",
    "format_search_results",
    "highlight_search_terms",
]
