"""
Async database session management with connection pooling
"""

import os
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from paywallet.core.config import settings


def build_engine(database_url: str):
    """
    Create the async engine for a database URL.

    SQLite URLs get no pool sizing (aiosqlite does not support it).
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=settings.debug, future=True)

    pool_size = int(os.getenv("DB_POOL_SIZE", settings.db_pool_size))
    max_overflow = int(os.getenv("DB_MAX_OVERFLOW", settings.db_max_overflow))
    return create_async_engine(
        database_url,
        echo=settings.debug,
        future=True,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
        pool_timeout=30,
    )


async_engine = build_engine(settings.database_url)

# expire_on_commit=False keeps loaded wallets usable for responses after commit
AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session for FastAPI dependency injection.
    Rolls back whatever is still open when the request fails.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
