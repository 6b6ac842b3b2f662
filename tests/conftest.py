"""
Shared test fixtures.

``store`` is a session on a fresh SQLite file per test (through aiosqlite),
used wherever the real SQL has to run. ``mock_db`` is an AsyncMock session for
service tests that patch the repository layer.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from admissions.core.database import Base
from admissions.core.rate_limit import reset_memory_store
from admissions.modules.applicants.models import Applicant  # noqa: F401
from admissions.modules.schedule.models import ScheduleEvent  # noqa: F401
from admissions.modules.users.models import User  # noqa: F401


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.flush = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.scalar = AsyncMock()
    db.add = MagicMock()
    return db


@pytest_asyncio.fixture
async def store_engine(tmp_path):
    """Async engine on a throwaway SQLite database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def store(store_engine):
    """Session on the throwaway database."""
    session_maker = async_sessionmaker(store_engine, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def orm_store(store_engine, store):
    """``store`` with the API's own tables created from the ORM models."""
    async with store_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return store


@pytest.fixture
def run_sql(store):
    """Run raw statements (DDL and fixture rows) on ``store`` and commit."""

    async def _run(*statements: str) -> None:
        for statement in statements:
            await store.execute(text(statement))
        await store.commit()

    return _run


@pytest.fixture(autouse=True)
def _clear_rate_limits():
    """Rate limit counters must not leak between tests."""
    reset_memory_store()
    yield
    reset_memory_store()
