"""
Database engine and unit-of-work sessions.
Async SQLAlchemy over aiosqlite by default; any async URL works.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from teleshop.config import settings
from teleshop.db.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the engine shared by the bot and the admin scripts."""

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        self.url = url or settings.db_url
        self.echo = settings.debug if echo is None else echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def _prepare_sqlite_file(self) -> None:
        url = make_url(self.url)
        if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
            return
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    async def init(self) -> None:
        """Create the engine and any missing tables. Safe to call twice."""
        if self.is_initialized:
            return

        self._prepare_sqlite_file()
        self._engine = create_async_engine(self.url, echo=self.echo)
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.debug(f"Database ready at {self.url}")

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        One unit of work: committed when the block exits normally, rolled back
        when it raises.
        """
        if not self.is_initialized:
            await self.init()

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


# Global database instance
db = Database()
