"""Database connection and session management."""

from collections.abc import AsyncGenerator
from typing import Any, Final

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from .config import Settings, settings

__all__ = ["create_engine", "engine", "get_session"]


def create_engine(config: Settings) -> AsyncEngine:
    """Create the async engine for the configured database URL.

    SQLite only receives the driver specific connect arguments, other
    backends get the pool sizing from the settings.
    """
    options: dict[str, Any] = {
        "echo": config.db_logging,
        "future": config.db_future,
        "pool_pre_ping": config.db_pool_pre_ping,
        "pool_recycle": config.db_pool_recycle,
    }
    if config.db_url.startswith("sqlite"):
        options["connect_args"] = {
            "check_same_thread": False,
            "timeout": config.db_timeout,
        }
    else:
        options.update(
            pool_timeout=config.db_pool_timeout,
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
        )
    return create_async_engine(config.db_url, **options)


engine: Final = create_engine(settings)


async def get_session() -> AsyncGenerator[AsyncSession]:
    """Get session for database operations."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
