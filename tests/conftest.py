"""Shared fixtures: a temporary database seeded with a small marketplace."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional
from uuid import uuid4

import pytest

from agroconnect.database import get_engine, get_session, init_db
from agroconnect.marketplace.models import (
    BuyerProfileORM, FarmerCertificationORM, FarmerProfileORM, ProductORM, ProfileORM,
)

KANO = (12.0022, 8.5920)
LAGOS = (6.6018, 3.3515)
ABUJA = (9.0579, 7.4951)


@dataclass
class Marketplace:
    """Ids of the seeded records, keyed by a short name."""

    now: datetime
    farmers: dict[str, str] = field(default_factory=dict)
    products: dict[str, str] = field(default_factory=dict)
    buyers: dict[str, str] = field(default_factory=dict)


@pytest.fixture
async def engine(tmp_path):
    """Create test database engine."""
    engine = get_engine(str(tmp_path / "test.db"))
    await init_db(engine)
    yield engine
    await engine.dispose()


def _farmer(name, farm, state_id, lga_id, location, rating, verified, certifications):
    profile = ProfileORM(id=str(uuid4()), user_type="farmer", full_name=name, is_verified=verified)
    farmer = FarmerProfileORM(
        id=str(uuid4()),
        user_id=profile.id,
        farm_name=farm,
        state_id=state_id,
        lga_id=lga_id,
        latitude=location[0] if location else None,
        longitude=location[1] if location else None,
        rating=rating,
        certifications=[FarmerCertificationORM(name=c) for c in certifications],
    )
    return profile, farmer


def _product(farmer_id, now, title, crop, price, quantity, created_days_ago, **extra):
    return ProductORM(
        id=str(uuid4()),
        farmer_id=farmer_id,
        title=title,
        crop_type=crop,
        price_per_unit=price,
        quantity_available=quantity,
        unit="bags",
        created_at=now - timedelta(days=created_days_ago),
        **extra,
    )


async def _add_buyer(engine, user_id: str, location: Optional[tuple] = None) -> str:
    """Create a buyer profile for ``user_id``; returns the buyer id."""
    async with get_session(engine) as session:
        session.add(ProfileORM(id=user_id, user_type="buyer", full_name="Chika Buyer"))
        buyer = BuyerProfileORM(
            id=str(uuid4()),
            user_id=user_id,
            company_name="Chika Foods Ltd",
            company_type="processor",
            latitude=location[0] if location else None,
            longitude=location[1] if location else None,
        )
        session.add(buyer)
    return buyer.id


@pytest.fixture
def add_buyer(engine):
    """Factory: ``await add_buyer(user_id, location=None)`` returns the buyer id."""
    async def factory(user_id: str, location: Optional[tuple] = None) -> str:
        return await _add_buyer(engine, user_id, location)
    return factory


@pytest.fixture
async def marketplace(engine) -> Marketplace:
    """
    Three farmers and seven listings.

    Active, in-stock listings ordered newest first:
    yam_abuja, tomato_lagos, rice_lagos, maize_kano, rice_kano.
    """
    now = datetime.utcnow()
    seeded = Marketplace(now=now)
    day = timedelta(days=1)

    async with get_session(engine) as session:
        kano_profile, kano = _farmer(
            "Musa Ibrahim", "Kano Golden Fields", 20, 21, KANO, 4.5, True, ["NAFDAC"]
        )
        lagos_profile, lagos = _farmer(
            "Adaeze Okafor", "Green Valley Farm", 25, 14, LAGOS, None, False, ["Organic", "SON"]
        )
        abuja_profile, abuja = _farmer(
            "Tunde Bello", None, 15, None, None, None, False, []
        )
        session.add_all([kano_profile, kano, lagos_profile, lagos, abuja_profile, abuja])
        seeded.farmers.update(kano=kano.id, lagos=lagos.id, abuja=abuja.id)

        products = {
            "rice_kano": _product(
                kano.id, now, "Premium FARO 44 Rice", "Rice", 42000, 120, 5,
                variety="FARO 44", quality_grade="premium", is_organic=False,
                harvest_date=(now - 10 * day).date(), available_from=now - day,
                images=["rice-1.jpg"], storage_method="Warehouse",
            ),
            "maize_kano": _product(
                kano.id, now, "Yellow Maize", "Maize", 18000, 300, 4,
                quality_grade="grade_a", harvest_date=(now - 100 * day).date(),
                available_from=now + 5 * day,
            ),
            "rice_lagos": _product(
                lagos.id, now, "Organic Rice from Ikeja", "Rice", 48000, 40, 3,
                variety="NERICA 1", quality_grade="premium", is_organic=True,
                harvest_date=(now - 40 * day).date(), available_from=now - 2 * day,
                description="Stone-free parboiled grains",
            ),
            "tomato_lagos": _product(
                lagos.id, now, "Fresh Tomatoes", "Tomato", 9000, 25, 2,
                quality_grade="grade_b", is_organic=True,
                harvest_date=(now - 2 * day).date(), available_from=now + 20 * day,
            ),
            "yam_abuja": _product(
                abuja.id, now, "White Yam Tubers", "Yam", 25000, 60, 1,
                variety="White Yam", quality_grade="grade_a",
                harvest_date=(now - 200 * day).date(), available_from=now - day,
            ),
            "cassava_inactive": _product(
                kano.id, now, "Old Cassava", "Cassava", 5000, 10, 30, is_active=False,
            ),
            "millet_sold_out": _product(
                lagos.id, now, "Sold out Millet", "Millet", 7000, 0, 6,
            ),
        }
        session.add_all(products.values())
        seeded.products.update({name: product.id for name, product in products.items()})

    return seeded
