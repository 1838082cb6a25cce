#!/usr/bin/env python3
"""
Demo script for the buyer search pipeline.

This script shows how to:
1. Create a throwaway database with a few farmers and listings
2. Search it with filters built from a query string
3. Rank nearby listings by distance from a buyer in Abuja
"""

import asyncio
import json
import tempfile
from datetime import date, datetime, timedelta
from pathlib import Path
from uuid import uuid4

from agroconnect.database import get_engine, get_session, init_db
from agroconnect.marketplace.models import (
    FarmerCertificationORM, FarmerProfileORM, ProductORM, ProfileORM,
)
from agroconnect.marketplace.service import SearchService
from agroconnect.search import deserialize_filters, generate_search_url, highlight_search_terms
from agroconnect.nigeria import CURRENCY
from agroconnect.search.geo import format_distance

# (full name, farm, state id, lga id, lat, lng, certifications)
FARMERS = [
    ("Musa Ibrahim", "Kano Golden Fields", 20, 21, 12.0022, 8.5920, ["NAFDAC"]),
    ("Adaeze Okafor", "Green Valley Farm", 25, 14, 6.6018, 3.3515, ["Organic", "SON"]),
    ("Tunde Bello", None, 15, None, 9.0765, 7.3986, []),
]

# (farmer index, title, crop, variety, price, quantity, organic, days until available)
LISTINGS = [
    (0, "Premium FARO 44 Rice", "Rice", "FARO 44", 42000, 120, False, 0),
    (0, "Yellow Maize, dry", "Maize", None, 18000, 300, False, 5),
    (1, "Organic Rice from Ikeja", "Rice", "NERICA 1", 48000, 40, True, 0),
    (1, "Fresh Tomatoes", "Tomato", None, 9000, 25, True, 20),
    (2, "Abuja White Yam", "Yam", "White Yam", 25000, 60, False, 0),
]


async def seed(engine) -> None:
    """Insert the sample farmers and listings."""
    async with get_session(engine) as session:
        farmer_ids = []
        for name, farm, state_id, lga_id, lat, lng, certifications in FARMERS:
            profile = ProfileORM(id=str(uuid4()), user_type="farmer", full_name=name, is_verified=bool(farm))
            farmer = FarmerProfileORM(
                id=str(uuid4()),
                user_id=profile.id,
                farm_name=farm,
                state_id=state_id,
                lga_id=lga_id,
                latitude=lat,
                longitude=lng,
                rating=4.5 if farm else None,
                certifications=[FarmerCertificationORM(name=c) for c in certifications],
            )
            session.add_all([profile, farmer])
            farmer_ids.append(farmer.id)

        for farmer_index, title, crop, variety, price, quantity, organic, days in LISTINGS:
            session.add(ProductORM(
                id=str(uuid4()),
                farmer_id=farmer_ids[farmer_index],
                title=title,
                crop_type=crop,
                variety=variety,
                price_per_unit=price,
                quantity_available=quantity,
                unit="bags",
                quality_grade="premium" if organic else "grade_a",
                is_organic=organic,
                harvest_date=date.today() - timedelta(days=14),
                available_from=datetime.utcnow() + timedelta(days=days),
                images=[],
            ))


async def run_search(service: SearchService, query_string: str) -> None:
    """Run one search described by a URL query string and print the results."""
    filters = deserialize_filters(query_string)

    print(f"\n{'='*50}")
    print(f"Search: {generate_search_url(filters) or '(no filters)'}")
    print("=" * 50)

    response = await service.search(filters)
    print(f"Matched {response.pagination.total}, showing {len(response.products)}")

    for product in response.products:
        title = highlight_search_terms(product.title, filters.query or "")
        distance = format_distance(product.distance) if product.distance is not None else "N/A"
        print(f"\n- {title}")
        print(f"  Price: {CURRENCY}{product.price_per_unit:,.0f} per {product.unit}")
        print(f"  Farmer: {product.farmer.name} ({product.farmer.state or 'unknown state'})")
        print(f"  Distance: {distance}")


async def main():
    """Main entry point."""
    print("\n" + "=" * 60)
    print("AgroConnect Buyer Search Demo")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        engine = get_engine(str(Path(tmp) / "demo.db"))
        await init_db(engine)
        await seed(engine)

        service = SearchService(engine)
        abuja = "buyer_lat=9.0579&buyer_lng=7.4951"

        await run_search(service, "q=rice&sort_by=price_asc")
        await run_search(service, "availability=now&is_organic=true")
        await run_search(service, f"{abuja}&radius=50")
        await run_search(service, f"{abuja}&crop_types=Rice,Maize&min_price=10000&max_price=45000")

        response = await service.search(deserialize_filters("q=yam"))
        print("\nEchoed filters:", json.dumps(response.filters))

        await engine.dispose()

    print("\n" + "=" * 60)
    print("Demo complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
