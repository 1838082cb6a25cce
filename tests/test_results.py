"""Tests for formatting joined rows into search results."""

import pytest

from agroconnect.search.results import (
    FarmerSummary,
    GeoPoint,
    SearchResult,
    apply_radius_filter,
    format_search_result,
    format_search_results,
    highlight_search_terms,
)

ABUJA = GeoPoint(9.0820, 8.6753)


@pytest.fixture
def row():
    """A joined product row, as returned by the marketplace query."""
    return {
        "id": "product-1",
        "title": "Premium Rice",
        "crop_type": "Rice",
        "variety": "FARO 44",
        "price_per_unit": 50000,
        "quantity_available": 100,
        "unit": "bags",
        "quality_grade": "premium",
        "is_organic": False,
        "harvest_date": "2024-01-15",
        "available_from": "2024-01-20T00:00:00",
        "description": "High quality rice",
        "images": ["image1.jpg"],
        "farmer_profile": {
            "id": "farmer-1",
            "user_id": "user-1",
            "farm_name": "Green Valley Farm",
            "latitude": 9.0820,
            "longitude": 8.6753,
            "rating": 4.5,
            "certifications": ["Organic", "NAFDAC"],
            "state": {"name": "Federal Capital Territory"},
            "lga": {"name": "Abuja Municipal"},
            "user": {"full_name": "John Farmer", "is_verified": True},
        },
    }


def test_format_result_flattens_farmer(row):
    result = format_search_result(row, ABUJA)

    assert result.id == "product-1"
    assert result.title == "Premium Rice"
    assert result.price_per_unit == 50000
    assert result.distance == 0
    assert result.farmer == FarmerSummary(
        id="user-1",
        name="John Farmer",
        farm_name="Green Valley Farm",
        rating=4.5,
        is_verified=True,
        state="Federal Capital Territory",
        lga="Abuja Municipal",
    )
    assert result.certifications == ["Organic", "NAFDAC"]
    assert result.harvest_date.isoformat() == "2024-01-15"


def test_no_buyer_location_means_no_distance(row):
    assert format_search_result(row).distance is None


def test_farmer_without_coordinates_has_no_distance(row):
    row["farmer_profile"]["latitude"] = None
    assert format_search_result(row, ABUJA).distance is None


def test_missing_farmer_uses_defaults(row):
    del row["farmer_profile"]
    row["images"] = None
    row["is_organic"] = None

    result = format_search_result(row, ABUJA)
    assert result.farmer.name == "Unknown Farmer"
    assert result.farmer.rating == 0
    assert result.farmer.is_verified is False
    assert result.farmer.state == ""
    assert result.certifications == []
    assert result.images == []
    assert result.is_organic is False
    assert result.distance is None


def test_partial_farmer_defaults(row):
    row["farmer_profile"].update(user=None, state=None, lga=None, rating=None, certifications=None)
    farmer = format_search_result(row).farmer
    assert farmer.name == "Unknown Farmer"
    assert farmer.rating == 0
    assert farmer.state == ""
    assert farmer.lga == ""


def test_serialized_keys_are_camel_case(row):
    data = format_search_result(row).model_dump(by_alias=True)
    assert "pricePerUnit" in data
    assert "cropType" in data
    assert data["farmer"]["farmName"] == "Green Valley Farm"
    assert data["farmer"]["isVerified"] is True


def test_format_results_keeps_order(row):
    second = dict(row, id="product-2", title="Second")
    results = format_search_results([row, second])
    assert [result.id for result in results] == ["product-1", "product-2"]


def _result(product_id, distance):
    return SearchResult(
        id=product_id, title="Maize", crop_type="Maize",
        price_per_unit=1000, quantity_available=5, unit="bags", distance=distance,
    )


def test_radius_filter_drops_far_and_unknown():
    results = [_result("near", 10), _result("edge", 50), _result("far", 51), _result("unknown", None)]
    kept = apply_radius_filter(results, 50, ABUJA)
    assert [result.id for result in kept] == ["near", "edge"]


def test_radius_filter_needs_radius_and_location():
    results = [_result("far", 400), _result("unknown", None)]
    assert apply_radius_filter(results, None, ABUJA) == results
    assert apply_radius_filter(results, 50, None) == results


def test_highlight_search_terms():
    assert highlight_search_terms("Premium Rice, rice bran", "rice") == (
        "Premium <mark>Rice</mark>, <mark>rice</mark> bran"
    )
    assert highlight_search_terms("Premium Rice", "") == "Premium Rice"


def test_highlight_escapes_pattern_characters():
    assert highlight_search_terms("TMS 4(2)1425 cassava", "4(2)") == "TMS <mark>4(2)</mark>1425 cassava"
