from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from typing import AsyncGenerator
import logging

from .config import settings

logger = logging.getLogger(__name__)

# ============================================================
# Async Database Engine
# ============================================================

ASYNC_DATABASE_URL = settings.async_database_url


def build_connect_args(url: str) -> dict:
    """
    asyncpg-only connection arguments.
    Other drivers (aiosqlite in tests) get none.
    """
    if not url.startswith('postgresql+asyncpg://'):
        return {}

    connect_args = {
        "server_settings": {
            "application_name": "media_catalog_api",
            "jit": "off",
        },
        "command_timeout": 60,
        "timeout": 10,
    }
    if settings.database_ssl_required:
        connect_args['ssl'] = 'require'
    return connect_args


async_engine = create_async_engine(
    ASYNC_DATABASE_URL,
    echo=settings.DB_ECHO,
    pool_pre_ping=True,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_timeout=30,
    pool_recycle=1800,
    connect_args=build_connect_args(ASYNC_DATABASE_URL),
)

AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# ============================================================
# Base Model
# ============================================================

Base = declarative_base()

# ============================================================
# Database Session Dependency
# ============================================================

async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Async database session dependency for FastAPI endpoints.

    Usage:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_async_db)):
            ...

    Repositories own their transactions (commit/rollback); the session is
    closed after the request.
    """
    session = AsyncSessionLocal()
    try:
        yield session
    finally:
        await session.close()


# ============================================================
# Database Health Check
# ============================================================

async def check_db_health() -> bool:
    """
    Check if database is accessible and responsive.
    Returns True if healthy, False otherwise.
    """
    session = AsyncSessionLocal()
    try:
        await session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
    finally:
        await session.close()


async def get_db_stats() -> dict:
    """Connection pool statistics"""
    pool = async_engine.pool
    return {
        "size": pool.size(),
        "checked_in": pool.checkedin(),
        "checked_out": pool.checkedout(),
        "overflow": pool.overflow(),
    }


@event.listens_for(async_engine.sync_engine, "checkout")
def receive_checkout(dbapi_conn, connection_record, connection_proxy):
    """Log when connection is checked out from pool"""
    logger.debug("Connection checked out from pool")


# ============================================================
# Startup/Shutdown Handlers
# ============================================================

async def init_db():
    logger.info("Checking database connection...")
    is_healthy = await check_db_health()
    if is_healthy:
        logger.info("Database health check passed")
    else:
        logger.error("Database health check failed")


async def close_db():
    """Close database connections on shutdown."""
    try:
        logger.info("Closing database connections...")
        await async_engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database: {e}")


__all__ = [
    'Base',
    'async_engine',
    'AsyncSessionLocal',
    'get_async_db',
    'check_db_health',
    'get_db_stats',
    'init_db',
    'close_db',
]
