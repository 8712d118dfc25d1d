"""
Core database module for the application.

This module provides the database engine, session factory, and other database-related utilities.
"""

from typing import AsyncGenerator, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, DateTime, func, text
from sqlalchemy.exc import SQLAlchemyError

from botguard.core.config import get_settings
from botguard.logging.setup import get_logger

settings = get_settings()
logger = get_logger("botguard.db")


class CustomBase:
    """Base class for all models with common columns and utility methods."""

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary excluding SQLAlchemy internal attributes."""
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}


Base = declarative_base(cls=CustomBase)


def _engine_kwargs() -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {"echo": settings.DB_ECHO, "pool_pre_ping": True}
    # SQLite không hỗ trợ các tham số pool kích thước
    if not settings.is_sqlite:
        kwargs["pool_size"] = settings.DATABASE_POOL_SIZE
        kwargs["max_overflow"] = settings.DATABASE_MAX_OVERFLOW
    return kwargs


engine = create_async_engine(settings.DATABASE_URL, **_engine_kwargs())

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session as a dependency.

    Yields:
        AsyncSession: SQLAlchemy async session
    """
    async with async_session() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            logger.error(f"Session error: {e}")
            await session.rollback()
            raise


async def check_database_connection() -> bool:
    """Return True when a trivial query succeeds."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection error: {e}")
        return False


async def create_tables() -> None:
    """Create all tables registered on Base."""
    # Import models so they are registered on Base.metadata
    from botguard import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
