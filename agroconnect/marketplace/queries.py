"""Apply backend-neutral search queries to SQLAlchemy statements."""

from sqlalchemy import Select, or_, select

from ..search.query import Predicate, SearchQuery
from .models import FarmerCertificationORM, FarmerProfileORM, ProductORM

COLUMNS = {
    "products.id": ProductORM.id,
    "products.title": ProductORM.title,
    "products.crop_type": ProductORM.crop_type,
    "products.variety": ProductORM.variety,
    "products.description": ProductORM.description,
    "products.quality_grade": ProductORM.quality_grade,
    "products.price_per_unit": ProductORM.price_per_unit,
    "products.quantity_available": ProductORM.quantity_available,
    "products.is_active": ProductORM.is_active,
    "products.is_organic": ProductORM.is_organic,
    "products.available_from": ProductORM.available_from,
    "products.harvest_date": ProductORM.harvest_date,
    "products.created_at": ProductORM.created_at,
    "farmer_profiles.state_id": FarmerProfileORM.state_id,
    "farmer_profiles.lga_id": FarmerProfileORM.lga_id,
}


def base_product_select() -> Select:
    """Products inner-joined to their farmer, so farmer predicates apply."""
    return select(ProductORM).join(ProductORM.farmer_profile)


def _column(name: str):
    try:
        return COLUMNS[name]
    except KeyError:
        raise ValueError(f"Unsupported search field: {name}") from None


def to_clause(predicate: Predicate):
    """SQL expression for one predicate."""
    op, value = predicate.op, predicate.value

    if op == "ilike_any":
        return or_(*(_column(name).icontains(value, autoescape=True) for name in predicate.field))
    if op == "overlaps":
        if predicate.field != "farmer_profiles.certifications":
            raise ValueError(f"Unsupported overlap field: {predicate.field}")
        return FarmerProfileORM.certifications.any(FarmerCertificationORM.name.in_(value))

    column = _column(predicate.field)
    if op == "eq":
        return column == value
    if op == "gt":
        return column > value
    if op == "gte":
        return column >= value
    if op == "lte":
        return column <= value
    if op == "in":
        return column.in_(value)
    raise ValueError(f"Unsupported operator: {op}")


def apply_predicates(statement: Select, query: SearchQuery) -> Select:
    for predicate in query.predicates:
        statement = statement.where(to_clause(predicate))
    return statement


def apply_sort_and_page(statement: Select, query: SearchQuery) -> Select:
    column = _column(query.sort.field)
    order = column.desc() if query.sort.descending else column.asc()
    return (
        statement
        .order_by(order, ProductORM.id)
        .offset(query.offset)
        .limit(query.limit)
    )
