"""
Database table creation.

Creates all tables registered on Base.metadata. Runs at application
startup and can be invoked directly.

Dependencies: sqlalchemy, support_desk.configs
System role: Database schema initialization

Usage:
    python -m support_desk.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from support_desk.boundary.db.base import Base
from support_desk.boundary.db.connection import dispose_engine, get_async_engine

# Import all models to register them with Base.metadata
from support_desk.boundary.db.models.session_model import SessionModel  # noqa: F401
from support_desk.boundary.db.models.message_model import MessageModel  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: existing tables are left unchanged.

    Args:
        engine: Engine to use (defaults to the configured engine)

    Raises:
        SQLAlchemyError: If the connection or DDL fails
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready", extra={"tables": sorted(Base.metadata.tables)})


async def _main() -> None:
    await create_all_tables()
    await dispose_engine()


if __name__ == "__main__":
    asyncio.run(_main())
