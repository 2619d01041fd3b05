"""Persistence: async engine for the cache database (cache writer pool).

The engine is created lazily on first use (get_engine) so import does not
trigger Settings validation. Cache tables are created by the caching agents
themselves; this package never creates or migrates schema.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from cachesweep.core.config import get_settings

logger = logging.getLogger(__name__)

# Set by get_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it on first use."""
    global engine
    if engine is not None:
        return engine
    settings = get_settings()
    pool_size = settings.db_pool_size if settings.db_pool_size is not None else 5
    max_overflow = settings.db_max_overflow if settings.db_max_overflow is not None else 5
    command_timeout = (
        settings.db_command_timeout if settings.db_command_timeout is not None else 60
    )
    connect_args: dict[str, Any] = {}
    if "asyncpg" in settings.database_url:
        connect_args["command_timeout"] = command_timeout
    engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_recycle=3600,
        connect_args=connect_args,
    )
    logger.info("Cache database engine created (dialect=%s)", engine.dialect.name)
    return engine


async def dispose_engine() -> None:
    """Close all pooled connections and drop the engine."""
    global engine
    if engine is None:
        return
    await engine.dispose()
    engine = None
    logger.info("Database engine disposed")
