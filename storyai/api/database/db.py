"""PostgreSQL connection management.

The schema is declared with SQLAlchemy and created at startup; queries run
as raw SQL on an asyncpg pool.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import asyncpg
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from .. import config


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


# Global asyncpg pool (set during API startup)
_pool: Optional[asyncpg.Pool] = None


def _check_configured() -> None:
    """Raise an error if the database is not configured."""
    if not config.DATABASE_URL:
        raise RuntimeError(
            "Database not configured. Set DATABASE_URL environment variable "
            "to a PostgreSQL connection string."
        )


def asyncpg_dsn(url: str) -> str:
    """Convert a SQLAlchemy-style URL to asyncpg format."""
    return url.replace("postgresql+asyncpg://", "postgresql://")


def sqlalchemy_url(url: str) -> str:
    """Make sure the URL selects the asyncpg driver for SQLAlchemy."""
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        url = "postgresql+asyncpg://" + url[len("postgresql://"):]
    return url


async def init_db() -> None:
    """Initialize database - create all tables and open the pool."""
    # Register models on Base.metadata
    from . import models  # noqa: F401

    global _pool
    _check_configured()

    engine: AsyncEngine = create_async_engine(sqlalchemy_url(config.DATABASE_URL), echo=False)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()

    _pool = await asyncpg.create_pool(
        asyncpg_dsn(config.DATABASE_URL),
        min_size=config.DB_POOL_MIN_SIZE,
        max_size=config.DB_POOL_MAX_SIZE,
    )


def get_pool() -> asyncpg.Pool:
    """Get the asyncpg pool. Raises if not initialized."""
    if _pool is None:
        raise RuntimeError(
            "Database pool not initialized. Set DATABASE_URL and start the API server."
        )
    return _pool


async def close_db() -> None:
    """Close the pool. Called during API shutdown."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_db() -> AsyncGenerator[asyncpg.Connection, None]:
    """Async context manager for a pooled connection."""
    async with get_pool().acquire() as conn:
        yield conn
