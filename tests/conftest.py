"""Test config and shared fixtures."""
import pytest
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from apps.catalog.models import Category, Product, Review


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """Create async test database session."""
    # Register all table models in metadata
    import apps.models  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async_session_maker = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def catalog(async_session: AsyncSession) -> AsyncSession:
    """
    Seed the catalog and detach everything, so reads come from the database.

    Tools(1): HAM-1 (active, 2 reviews), SAW-2 (inactive)
    Garden(2): HOSE-3 (active, 1 review)
    """
    async_session.add_all([
        Category(id=1, name="Tools", description="Hand tools"),
        Category(id=2, name="Garden"),
    ])
    await async_session.flush()
    async_session.add_all([
        Product(id=1, sku="HAM-1", name="Hammer", price=12.5, active=True, category_id=1),
        Product(id=2, sku="SAW-2", name="Saw", price=20.0, active=False, category_id=1),
        Product(id=3, sku="HOSE-3", name="Hose", price=30.0, active=True, category_id=2),
    ])
    await async_session.flush()
    async_session.add_all([
        Review(id=1, product_id=1, rating=5, body="Solid"),
        Review(id=2, product_id=1, rating=4),
        Review(id=3, product_id=3, rating=2, body="Leaks"),
    ])
    await async_session.commit()
    async_session.expunge_all()
    return async_session


@pytest.fixture
async def client(catalog: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client bound to the seeded session."""
    from main import app
    from repokit.database.manager import get_db

    async def _get_db():
        yield catalog

    app.dependency_overrides[get_db] = _get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
