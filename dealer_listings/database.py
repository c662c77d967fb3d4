"""
Database engine and session management.
Builds the async SQLAlchemy engine and session factory that the application factory injects into request handlers.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import text, DateTime, Integer, func
from fastapi import Request
from dealer_listings.config import Settings
from datetime import datetime
from typing import AsyncGenerator
import logging

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all database models.
    Includes common fields: an auto-incrementing integer id and created_at.
    """

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation of the model."""
        return f"<{self.__class__.__name__}(id={self.id})>"


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database.

    Pool sizing only applies to server databases; SQLite picks its own pool.
    """
    url = settings.sqlalchemy_database_url

    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.debug)

    return create_async_engine(
        url,
        echo=settings.debug,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,  # Validate connections before use
        pool_recycle=3600,
        pool_timeout=30,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create the session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency to get database session.
    Yields a session from the factory stored on the application and closes it after use.
    """
    session_factory = request.app.state.session_factory

    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def check_database_connection(engine: AsyncEngine) -> bool:
    """
    Test database connectivity.
    Returns True if connection is successful, False otherwise.
    """
    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            result.scalar()
            logger.info("Database connection successful")
            return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False


async def create_tables(engine: AsyncEngine) -> None:
    """Create all database tables that do not exist yet."""
    # Import models so their tables are registered on the metadata
    import dealer_listings.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")
