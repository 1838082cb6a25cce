"""Database configuration and session management."""

from pathlib import Path
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, AsyncEngine
from sqlalchemy.orm import sessionmaker

from .config import marketplace_config
from .logging_config import get_logger
from .marketplace.models import Base, StateORM, LgaORM
from .nigeria import NIGERIAN_STATES, all_lgas

logger = get_logger(__name__)


def get_database_url(db_path: Optional[str] = None) -> str:
    """Get database URL from path or configuration."""
    if db_path is None:
        db_path = marketplace_config.database_path

    # Ensure directory exists
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return f"sqlite+aiosqlite:///{db_path}"


def get_engine(db_path: Optional[str] = None) -> AsyncEngine:
    """Create async database engine."""
    url = get_database_url(db_path)
    return create_async_engine(url, echo=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create tables and load the state/LGA reference rows."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await seed_locations(engine)


async def seed_locations(engine: AsyncEngine) -> None:
    """Insert any states and LGAs missing from the database."""
    async with get_session(engine) as session:
        existing_states = set((await session.execute(select(StateORM.id))).scalars())
        existing_lgas = set((await session.execute(select(LgaORM.id))).scalars())

        new_states = [
            StateORM(id=state.id, name=state.name, code=state.code)
            for state in NIGERIAN_STATES
            if state.id not in existing_states
        ]
        new_lgas = [
            LgaORM(id=lga.id, name=lga.name, state_id=lga.state_id)
            for lga in all_lgas()
            if lga.id not in existing_lgas
        ]
        session.add_all(new_states)
        # States must exist before their LGAs reference them.
        await session.flush()
        session.add_all(new_lgas)

    if new_states or new_lgas:
        logger.info("Seeded %d states and %d LGAs", len(new_states), len(new_lgas))


@asynccontextmanager
async def get_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Get async database session."""
    async_session = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
