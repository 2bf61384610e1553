from typing import AsyncGenerator, Optional
import logging

from fastapi import Request
from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from .config import normalize_database_url

logger = logging.getLogger("campus_api.database")


def _engine_kwargs(url: str) -> dict:
    kwargs = {"echo": False, "future": True}
    if url.startswith("sqlite"):
        # Allow connections to be used across threads (useful for uvicorn worker threads)
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or "mode=memory" in url or url == "sqlite+aiosqlite://":
            # In-memory DBs must share one connection or the schema disappears.
            kwargs["poolclass"] = StaticPool
        else:
            kwargs["poolclass"] = NullPool
    elif "asyncpg" in url:
        kwargs["poolclass"] = NullPool
    return kwargs


class Database:
    """Owns the async engine and session factory for one application.

    Created unconnected; `connect()` runs at application startup and
    `disconnect()` at shutdown.
    """

    def __init__(self, url: str):
        self.url = normalize_database_url(url)
        self.engine: Optional[AsyncEngine] = None
        self._session_factory = None

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name if self.engine is not None else ""

    async def connect(self) -> None:
        if self.engine is not None:
            return
        self.engine = create_async_engine(self.url, **_engine_kwargs(self.url))
        self._session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )
        # Postgres schemas are managed by `alembic upgrade head`; SQLite (dev and
        # tests) gets its tables created directly.
        if "postgres" not in self.dialect:
            await self.create_all()
        logger.info("Database connected (dialect=%s)", self.dialect)

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def disconnect(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self._session_factory = None
        logger.info("Database disconnected")

    def session(self) -> AsyncSession:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")
        return self._session_factory()


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
