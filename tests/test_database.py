"""Tests for database configuration."""

import pytest

from sqlalchemy import func, select, text

from agroconnect.database import get_engine, init_db, get_session, seed_locations
from agroconnect.marketplace.models import LgaORM, StateORM


@pytest.fixture
def test_db_path(tmp_path):
    """Use temporary database for tests."""
    return tmp_path / "nested" / "test.db"


@pytest.mark.asyncio
async def test_init_db_creates_tables(test_db_path):
    """Test that init_db creates the file and every table."""
    engine = get_engine(str(test_db_path))
    await init_db(engine)

    assert test_db_path.exists()

    async with get_session(engine) as session:
        result = await session.execute(text("SELECT name FROM sqlite_master WHERE type = 'table'"))
        tables = set(result.scalars())

    await engine.dispose()

    assert {
        "states", "lgas", "profiles", "farmer_profiles", "farmer_certifications",
        "buyer_profiles", "products", "buyer_favorites",
    } <= tables


@pytest.mark.asyncio
async def test_init_db_seeds_locations(test_db_path):
    """States and LGAs are loaded once, even when init runs again."""
    engine = get_engine(str(test_db_path))
    await init_db(engine)
    await seed_locations(engine)

    async with get_session(engine) as session:
        states = (await session.execute(select(func.count()).select_from(StateORM))).scalar()
        lgas = (await session.execute(select(func.count()).select_from(LgaORM))).scalar()
        ikeja = await session.get(LgaORM, 14)

    await engine.dispose()

    assert states == 37
    assert lgas == 32
    assert ikeja.name == "Ikeja"
    assert ikeja.state_id == 25


@pytest.mark.asyncio
async def test_get_session_works(test_db_path):
    """Test that get_session returns working session."""
    engine = get_engine(str(test_db_path))
    await init_db(engine)

    async with get_session(engine) as session:
        result = await session.execute(text("SELECT 1"))
        assert result.scalar() == 1

    await engine.dispose()


@pytest.mark.asyncio
async def test_get_session_rolls_back_on_error(test_db_path):
    engine = get_engine(str(test_db_path))
    await init_db(engine)

    with pytest.raises(RuntimeError):
        async with get_session(engine) as session:
            session.add(StateORM(id=99, name="Atlantis", code="AT"))
            await session.flush()
            raise RuntimeError("boom")

    async with get_session(engine) as session:
        assert await session.get(StateORM, 99) is None

    await engine.dispose()
