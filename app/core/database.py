"""
Database Configuration

Async SQLAlchemy 2.0 setup with asyncpg driver for PostgreSQL.

The engine is built once per process in the application lifespan and
shared through ``app.state``; nothing here keeps module-level state.
"""

import logging
import ssl
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import Settings


logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    All models should inherit from this class.
    """
    pass


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Create the process-wide async engine.

    Handles SSL configuration and per-statement timeouts for asyncpg.
    """
    db_url = settings.DATABASE_URL
    connect_args: dict = {}

    if db_url.startswith("postgresql+asyncpg"):
        # asyncpg doesn't accept sslmode/channel_binding params in URL
        if "?" in db_url:
            db_url = db_url.split("?")[0]
        connect_args["command_timeout"] = settings.DB_COMMAND_TIMEOUT
        if settings.DATABASE_SSL:
            connect_args["ssl"] = ssl.create_default_context()

    engine_kwargs: dict = {
        "echo": False,
        "pool_pre_ping": True,
        "connect_args": connect_args,
    }
    if not db_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
        engine_kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW

    return create_async_engine(db_url, **engine_kwargs)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to ``engine``."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def check_connection(engine: AsyncEngine) -> None:
    """
    Round-trip a trivial query.

    Called at startup; any exception propagates so the process refuses
    to serve without a database.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("Connected to database")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Usage in FastAPI:
        @app.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...

    Yields:
        AsyncSession: An async database session.
    """
    session_maker: async_sessionmaker[AsyncSession] = request.app.state.session_maker
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            # Closing also rolls back a transaction left open by cancellation.
            await session.close()


async def init_db(engine: AsyncEngine) -> None:
    """
    Initialize database tables.

    Note: In production, use Alembic migrations instead.
    This is useful for testing or initial development.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    """Close database connections."""
    await engine.dispose()
