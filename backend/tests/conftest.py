"""Test configuration and fixtures."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from recommender.database import Base
from recommender.services.snapshot import PropertySnapshot


@pytest.fixture
def make_snapshot():
    def _make(id: str = "p1", **fields) -> PropertySnapshot:
        return PropertySnapshot(id=id, **fields)
    return _make


@pytest.fixture
def villa():
    return PropertySnapshot(
        id="target",
        property_type="villa",
        listing_type="sale",
        price=1_000_000,
        city="Denpasar",
        state="Bali",
        bedrooms=4,
        bathrooms=3,
        area_sqm=200,
        features={"pool": True, "garage": True, "security": True},
    )


@pytest_asyncio.fixture
async def db_session():
    import recommender.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()
