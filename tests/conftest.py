"""Pytest configuration and fixtures."""

import os
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment before any app code runs
os.environ["APP_ENV"] = "test"
os.environ["CITATION_WORKER_SECRET"] = "test-worker-secret"
os.environ["CITATION_CACHE_BACKEND"] = "memory"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")

from brandlens.config import get_settings  # noqa: E402

get_settings.cache_clear()

from brandlens.adapters.parsing.brand_matcher import BrandCatalogEntry  # noqa: E402
from brandlens.models import Base  # noqa: E402


@pytest.fixture
def catalog():
    """Org brand with a variant plus two competitors"""
    return [
        BrandCatalogEntry("Acme Corp", variants=("Acme", "acme.io"), is_org_brand=True),
        BrandCatalogEntry("TechCorp"),
        BrandCatalogEntry("Globex"),
    ]


@pytest.fixture
def org_brands():
    return [BrandCatalogEntry("Acme Corp", variants=("Acme",), is_org_brand=True)]


@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
