"""
Database Configuration

Async SQLAlchemy engine and session factory.

The engine is created by ``init_db()`` during application startup and disposed
by ``close_db()`` on shutdown. Request handlers receive one ``AsyncSession`` per
request through the ``get_db`` dependency; nothing holds a connection beyond a
single request.
"""

from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from admissions.core.config import settings


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


engine: AsyncEngine | None = None
async_session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
    expire_on_commit=False,
)


def create_engine_from_settings(url: str | None = None) -> AsyncEngine:
    """Build an async engine with the configured pool settings."""
    database_url = url or settings.database_url
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=settings.database_echo)

    return create_async_engine(
        database_url,
        echo=settings.database_echo,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_recycle=settings.database_pool_recycle,
        pool_pre_ping=True,
    )


async def init_db(url: str | None = None) -> AsyncEngine:
    """
    Create the engine, bind the session factory and test connectivity.

    Call this on application startup.
    """
    global engine
    engine = create_engine_from_settings(url)
    async_session_maker.configure(bind=engine)

    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))

    return engine


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a database session.

    Usage:
        @router.get("/items")
        async def list_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_maker() as session:
        yield session


async def close_db() -> None:
    """Dispose of the engine and its connection pool."""
    global engine
    if engine is not None:
        await engine.dispose()
        engine = None
