"""Database engine construction."""

import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from agroclima.config import DATABASE_URL, DB_POOL_SIZE

logger = logging.getLogger(__name__)


def create_engine(url: str = DATABASE_URL, pool_size: int = DB_POOL_SIZE) -> AsyncEngine:
    """Create the async engine that owns the store connection pool.

    Args:
        url: SQLAlchemy database URL
        pool_size: Maximum number of concurrent connections

    Returns:
        Configured AsyncEngine instance
    """
    safe_url = make_url(url).render_as_string(hide_password=True)
    logger.info(f"Creating database engine for {safe_url} (pool_size={pool_size})")
    return create_async_engine(
        url,
        pool_size=pool_size,
        max_overflow=0,
        pool_pre_ping=True,
    )
