"""Shared pytest fixtures for all test suites."""

import os
import uuid
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from locallens.db.context import RequestContext
from locallens.db.models import Base
from locallens.models.itinerary import Activity, DayItinerary, Itinerary


def make_activity(location: str, time: str = "09:00") -> Activity:
    """Activity with only the fields tests care about."""
    return Activity(time=time, location=location, description=f"Visit {location}")


def make_itinerary(*day_locations: list[str], destination: str = "Jaipur") -> Itinerary:
    """Itinerary whose days hold activities at the given locations."""
    return Itinerary(
        destination=destination,
        duration=len(day_locations),
        theme="Heritage, Food",
        starting_location="Delhi",
        travelers_count=2,
        days=[
            DayItinerary(day=i + 1, activities=[make_activity(loc) for loc in locations])
            for i, locations in enumerate(day_locations)
        ],
    )


@pytest.fixture
def build_itinerary():
    """Factory fixture: ``build_itinerary(["A", "B"], ["C"])``."""
    return make_itinerary


@pytest.fixture
def itinerary() -> Itinerary:
    """Three-day itinerary: [A, B, C], [D, E], [F]."""
    return make_itinerary(["A", "B", "C"], ["D", "E"], ["F"])


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext(user_id=uuid.uuid4())


@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def sqlite_session(sqlite_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Async session on the in-memory SQLite engine."""
    async with AsyncSession(sqlite_engine, expire_on_commit=False) as session:
        yield session


@pytest_asyncio.fixture
async def postgres_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine for PostgreSQL integration tests.

    Requires DATABASE_URL to be set to a real PostgreSQL connection string.
    Tests using this fixture should be marked with @pytest.mark.postgres.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL not set - skipping postgres test")

    if not database_url.startswith(("postgresql://", "postgresql+asyncpg://")):
        pytest.skip(f"DATABASE_URL is not PostgreSQL: {database_url}")

    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    engine = create_async_engine(database_url, poolclass=NullPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def postgres_session(postgres_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for PostgreSQL integration tests."""
    async with AsyncSession(postgres_engine, expire_on_commit=False) as session:
        yield session
        await session.rollback()
