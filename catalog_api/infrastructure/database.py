"""Database configuration and session management.

Provides the async SQLAlchemy engine and session factory. Both are
created on first use so the in-memory backend never opens a pool.
"""

from functools import lru_cache

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from catalog_api.infrastructure.config import settings

# Base class for models
Base = declarative_base()


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Get the process-wide async engine.

    Returns:
        AsyncEngine bound to ``settings.database_url``.
    """
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
    )


@lru_cache(maxsize=1)
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory bound to the process engine.

    Returns:
        Session factory producing AsyncSession instances.
    """
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables() -> None:
    """Create catalog tables that do not exist yet."""
    # Register models on Base.metadata
    import catalog_api.catalog.models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_connection() -> bool:
    """Check that the database answers a trivial query.

    Returns:
        True if ``SELECT 1`` succeeded.
    """
    async with get_engine().connect() as conn:
        result = await conn.execute(text("SELECT 1"))
        return result.scalar_one() == 1


async def dispose_engine() -> None:
    """Close pooled connections, if the engine was ever created."""
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
