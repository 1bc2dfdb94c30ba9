import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from factory_telemetry.core.config import Settings, get_settings
from factory_telemetry.core.exceptions import DatabaseNotConfiguredError

logger = logging.getLogger(__name__)


class Database:
    """
    Connection pool handle, built once at startup and shared through app.state.
    """

    def __init__(self, url: str, pool_size: int = 10, max_overflow: int = 0, echo: bool = False):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(
            url, echo=echo, pool_size=pool_size, max_overflow=max_overflow
        )
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["Database"]:
        if not settings.DATABASE_URL:
            logger.warning("DATABASE_URL not set. Telemetry endpoints will fail until it is configured.")
            return None
        return cls(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            echo=settings.DB_ECHO,
        )

    async def create_all(self, metadata) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def ping(self) -> None:
        async with self.session_factory() as session:
            await session.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise DatabaseNotConfiguredError()
    return database


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    database = get_database(request)
    async with database.session_factory() as session:
        yield session


# Synchronous URL for Alembic and maintenance scripts

def get_sync_database_url() -> str:
    """
    Database URL with the async driver swapped for psycopg2.
    """
    settings = get_settings()
    if not settings.DATABASE_URL:
        raise DatabaseNotConfiguredError()
    return settings.DATABASE_URL.replace('postgresql+asyncpg', 'postgresql+psycopg2')


