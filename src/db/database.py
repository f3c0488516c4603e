"""
Database connection and session management.

Provides the SQLAlchemy declarative base, the Database handle that owns the
engine and session factory, and the FastAPI session dependency.
"""

import asyncio
from collections.abc import AsyncGenerator, Awaitable, Callable
from http import HTTPStatus

from fastapi import HTTPException, Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.db.config import DatabaseSettings
from src.utils.logger import logger


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Database:
    """
    Owns the async engine and session factory for the process.

    Constructed once in the application lifespan and stored on
    ``app.state.database``. ``connect`` prepares the schema and runs the
    ``on_connect`` hook exactly once per successful connection.
    """

    def __init__(
        self,
        settings: DatabaseSettings,
        on_connect: Callable[["Database"], Awaitable[None]] | None = None,
    ):
        self.settings = settings
        self.engine: AsyncEngine = create_async_engine(
            settings.get_async_url(),
            echo=settings.echo,
            pool_pre_ping=True,  # Verify connections before using
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_timeout=settings.pool_timeout,
            connect_args=settings.get_connect_args(),
        )
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self._on_connect = on_connect
        self._connected = False
        self._lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        """
        Establish connectivity, create missing tables and run the
        on_connect hook.

        Safe to call on every request; only the first successful call does
        any work. Connection errors propagate to the caller.
        """
        if self._connected:
            return

        async with self._lock:
            if self._connected:
                return

            logger.info("[DATABASE] Connecting and preparing tables...")
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            self._connected = True
            logger.info("[DATABASE] Connected")

            if self._on_connect:
                # The connection is usable even when setup work fails
                try:
                    await self._on_connect(self)
                except Exception as e:
                    logger.exception("[DATABASE] on_connect hook failed", error=str(e))

    async def ping(self) -> None:
        """Run a trivial statement to verify the database answers."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    def session(self) -> AsyncSession:
        """Open a new session. Use as an async context manager."""
        return self.session_factory()

    async def close(self) -> None:
        """
        Close database connections and dispose of engine.

        Call this on application shutdown.
        """
        logger.info("[DATABASE] Closing database connections...")
        await self.engine.dispose()
        self._connected = False
        logger.info("[DATABASE] Database connections closed")


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the application's Database handle."""
    return request.app.state.database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions.

    Ensures the database is connected (connecting and seeding on first use)
    before handing out a session.

    Yields:
        AsyncSession: Database session for use in endpoints

    Raises:
        HTTPException: 500 if the database cannot be reached
    """
    database = get_database(request)
    try:
        await database.connect()
    except Exception as e:
        logger.exception("[DATABASE] Database connection failed", error=str(e))
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail="Database connection failed",
        )

    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
