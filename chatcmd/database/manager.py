import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from config.settings import settings

from ..core.errors import ConfigurationError
from .models import Base

logger = logging.getLogger(__name__)

# scheme -> (async driver scheme, engine options)
ASYNC_DRIVERS: dict[str, tuple[str, dict[str, Any]]] = {
    "sqlite": ("sqlite+aiosqlite", {"connect_args": {"check_same_thread": False}}),
    "postgresql": (
        "postgresql+asyncpg",
        {"pool_size": 20, "max_overflow": 30, "pool_pre_ping": True, "pool_recycle": 300},
    ),
}


def async_database_url(database_url: str) -> tuple[str, dict[str, Any]]:
    """Rewrite a plain database URL to its async driver and return engine options."""
    scheme, sep, rest = database_url.partition("://")
    base = scheme.split("+", 1)[0]
    if not sep or base not in ASYNC_DRIVERS:
        raise ConfigurationError(f"Unsupported database URL: {database_url}")

    driver, options = ASYNC_DRIVERS[base]
    return f"{driver}://{rest}", dict(options)


class DatabaseManager:
    """Owns the async engine and hands out transactional sessions."""

    def __init__(self, database_url: str | None = None) -> None:
        self.database_url = database_url or settings.database_url
        url, options = async_database_url(self.database_url)
        self.engine: AsyncEngine = create_async_engine(url, echo=settings.debug, **options)
        self.session_factory = async_sessionmaker(bind=self.engine, class_=AsyncSession, expire_on_commit=False)

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Command tables ready")

    async def drop_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.warning("Command tables dropped")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session committed on success and rolled back on any error."""
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False
        return True

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Database connection closed")


db_manager = DatabaseManager()
