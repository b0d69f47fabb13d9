"""Database connection and transaction management.

Provides async database engine, session factory, and the short
per-operation transactions the repositories run in.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import logfire
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from famshare.config import Settings
from famshare.domain.error import StoreUnavailableError


def create_engine(settings: Settings) -> AsyncEngine:
    """Create async database engine.

    Args:
        settings: Application settings with database URL

    Returns:
        Configured async engine
    """
    return create_async_engine(
        settings.database.url,
        echo=settings.debug,  # Log SQL queries in debug mode
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
        pool_timeout=settings.database.connect_timeout_seconds,
        connect_args={
            "timeout": settings.database.connect_timeout_seconds,
            "command_timeout": settings.database.command_timeout_seconds,
        },
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory.

    Args:
        engine: Database engine

    Returns:
        Session factory for creating database sessions
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Don't expire objects after commit
        autoflush=False,  # Manual flushing for better control
        autocommit=False,  # Explicit transaction management
    )


@asynccontextmanager
async def transaction(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Run a block in its own transaction.

    Commits on success and rolls back on error. Connection, timeout and
    operational failures surface as StoreUnavailableError; constraint
    violations propagate unchanged.

    Args:
        session_factory: Factory for creating sessions

    Yields:
        Database session inside an open transaction

    Raises:
        StoreUnavailableError: If the database could not be reached in time
    """
    try:
        async with session_factory.begin() as session:
            yield session
    except (
        OperationalError,
        InterfaceError,
        PoolTimeoutError,
        asyncio.TimeoutError,
        OSError,
    ) as e:
        logfire.warn(
            "Database unavailable",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise StoreUnavailableError(f"Database unavailable: {type(e).__name__}") from e
