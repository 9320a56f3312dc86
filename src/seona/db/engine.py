"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via FastAPI.

create_app() builds one engine + session factory from its Settings and
keeps them on app.state; get_db hands out sessions from there. The CLI
builds its own for the --database-url it is given.

The default URL is a local SQLite file (aiosqlite driver); any async
driver URL works, e.g. postgresql+asyncpg://... in production.
"""

from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an engine; pool sizing only applies to server databases."""
    kwargs = {"echo": echo}
    if not database_url.startswith("sqlite"):
        kwargs.update(pool_size=5, max_overflow=15)
    return create_async_engine(database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Session factory — each request gets its own session.
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(bind: AsyncEngine) -> None:
    """Create tables that don't exist yet."""
    from seona.db.models import Base

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with request.app.state.session_factory() as session:
        yield session
