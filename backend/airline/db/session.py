"""
Database handle and per-request session dependency.

The engine and session factory live on a Database object that the
application factory constructs and stores on app.state. Nothing here
creates an engine at import time, so tests (and alternative entry points)
supply their own handle.
"""

from typing import Any, AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from airline.core.config import Settings
from airline.core.logging import get_logger

logger = get_logger(__name__)


class Database:
    def __init__(self, url: str, **engine_kwargs: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        engine_kwargs: dict[str, Any] = {"echo": settings.DEBUG, "pool_pre_ping": True}
        if not settings.DATABASE_URL.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_timeout=settings.DB_POOL_TIMEOUT,
                pool_recycle=settings.DB_POOL_RECYCLE,
            )
        return cls(settings.DATABASE_URL, **engine_kwargs)

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("database_ping_failed", error=str(e))
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("database_disposed")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session bound to the application's Database.
    Services commit their own units of work; anything left uncommitted
    is rolled back when the session closes.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
