"""
Database connection management with SQLAlchemy async support.

Supports SQLite (development) and MySQL/PostgreSQL (production) via DATABASE_URL.
"""
import asyncio
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.db.models import Base
from app.domain.entities import StoreUnavailableError
from app.domain.unit_of_work import SQLAlchemyUnitOfWork

logger = logging.getLogger(__name__)

# Database engine (will be initialized in init_db)
engine = None
async_session_maker = None

# Serialises catalog write transactions; on a shared connection, reads too
catalog_write_lock: Optional[asyncio.Lock] = None

# True when every session shares one connection (in-memory SQLite)
shared_connection = False


def _is_in_memory(database_url: str) -> bool:
    return database_url.startswith("sqlite") and (
        ":memory:" in database_url or database_url.endswith("://")
    )


async def init_db(database_url: Optional[str] = None):
    """Initialize database connection and create tables."""
    global engine, async_session_maker, catalog_write_lock, shared_connection

    if database_url is None:
        database_url = settings.database_url
    logger.info(f"Initializing database: {database_url.split('://')[0]}")

    # Create async engine with appropriate settings based on database type
    shared_connection = _is_in_memory(database_url)
    if shared_connection:
        # One shared connection, otherwise every session would see its own empty database
        engine = create_async_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    elif database_url.startswith("sqlite"):
        engine = create_async_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )
    else:
        # MySQL/PostgreSQL configuration
        engine = create_async_engine(
            database_url,
            echo=False,
            pool_pre_ping=True,  # Verify connections before using
            pool_recycle=3600,   # Recycle connections after 1 hour
        )

    # Create session factory
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    catalog_write_lock = asyncio.Lock()

    # Create all tables
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except SQLAlchemyError as e:
        logger.error(f"❌ Failed to create tables: {e}")
        raise StoreUnavailableError(e) from e

    logger.info("✅ Database initialized successfully")


def get_unit_of_work(for_write: bool = False) -> SQLAlchemyUnitOfWork:
    """
    Open a Unit of Work on a fresh session.

    Write units hold the catalog write lock from __aenter__ until commit or
    rollback has finished. On a shared connection read units take it as well:
    a reader's commit would otherwise commit a writer's pending changes.

    Usage:
        async with get_unit_of_work() as uow:
            coffees = await uow.coffees.list_all()
    """
    if async_session_maker is None:
        raise StoreUnavailableError("Database not initialized. Call init_db() first.")

    return SQLAlchemyUnitOfWork(
        async_session_maker(),
        lock=catalog_write_lock if (for_write or shared_connection) else None,
    )


async def close_db():
    """Close database connection."""
    global engine, async_session_maker, shared_connection
    if engine:
        await engine.dispose()
        logger.info("Database connection closed")
    engine = None
    async_session_maker = None
    shared_connection = False
