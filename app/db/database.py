"""
Database configuration and session management.
Uses async SQLAlchemy with PostgreSQL for optimal performance.
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from app.core.config import settings

# Async engine for main application
async_engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=20,
    max_overflow=30,
    pool_recycle=3600,  # 1 hour
)

# Session maker
AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=True,
)

# Base class for all models
Base = declarative_base()


async def init_db():
    """
    Initialize database tables.
    Only use in development - use migrations in production.
    """
    async with async_engine.begin() as conn:
        # Import all models to ensure they're registered
        from app.db.models import product  # noqa: F401

        # Create all tables
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """
    Close database connections gracefully.
    """
    await async_engine.dispose()
