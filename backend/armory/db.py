import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncEngine, AsyncSession
from sqlalchemy.orm import DeclarativeBase


logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class Database:
    """
    Store handle owned by the application.
    Opened in the lifespan handler at startup and disposed on shutdown;
    request code reaches it through app.state, never through a module global.
    """

    def __init__(self, url: str, **engine_kwargs):
        self.url = url
        self.engine: AsyncEngine = _create_engine(url, **engine_kwargs)
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False, class_=AsyncSession)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.sessionmaker() as session:
            yield session

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database pool closed")


def _create_engine(url: str, **engine_kwargs) -> AsyncEngine:
    try:
        return create_async_engine(url, echo=False, future=True, **engine_kwargs)
    except ModuleNotFoundError as e:
        if "asyncpg" in str(e):
            # Fallback for environments without asyncpg (e.g., local runs)
            fallback_url = "sqlite+aiosqlite:///:memory:"
            logger.warning("asyncpg not installed, falling back to %s", fallback_url)
            return create_async_engine(fallback_url, echo=False, future=True)
        raise


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.db
    async with database.session() as session:
        yield session
