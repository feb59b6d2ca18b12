"""
Database connection management.

Provides the async SQLAlchemy engine, session factory, and FastAPI
dependency for per-request session injection. The engine is created
once per process and shared.

Dependencies: sqlalchemy, support_desk.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from support_desk.configs import get_settings


def _ensure_sqlite_directory(url: str) -> None:
    database = make_url(url).database
    if database and database != ":memory:" and not database.startswith("file:"):
        Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Create the process-wide async engine.

    SQLite gets foreign key enforcement and its parent directory created;
    server databases get a sized pool with pre-ping.

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Usage:
        engine = get_async_engine()
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    db_config = get_settings().database
    url = db_config.async_database_url

    if db_config.is_sqlite:
        _ensure_sqlite_directory(url)
        engine = create_async_engine(
            url,
            echo=db_config.echo_sql,
            connect_args={"check_same_thread": False},
        )
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory for database operations.

    Sessions use autoflush=False and expire_on_commit=False so ORM rows
    stay readable after commit for response serialization.

    Returns:
        async_sessionmaker: Async session factory

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session injection with automatic cleanup.

    Yields:
        AsyncSession: Async SQLAlchemy session scoped to the request

    Usage:
        from fastapi import Depends

        @router.get("/sessions/{id}")
        async def get_session(id: UUID, db: AsyncSession = Depends(get_async_db)):
            return await session_crud.get_by_id(db, id)
    """
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        yield session


async def dispose_engine() -> None:
    """Close pooled connections and drop the cached engine."""
    if get_async_engine.cache_info().currsize:
        await get_async_engine().dispose()
    get_async_session_factory.cache_clear()
    get_async_engine.cache_clear()
