"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory SQLite database, ORM row factories, temp directories
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from support_desk.boundary.db.models.message_model import ContentType, MessageModel, SenderType
from support_desk.boundary.db.models.session_model import SessionModel, SessionStatus, TaskStatus

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from support_desk.boundary.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


def build_session_model(**overrides) -> SessionModel:
    """Transient SessionModel with every column populated."""
    values = {
        "id": uuid.uuid4(),
        "visitor_name": "CalmOwl42",
        "status": SessionStatus.ACTIVE,
        "last_message_at": None,
        "unread_by_visitor": 0,
        "unread_by_staff": 0,
        "topic": None,
        "task_status": TaskStatus.REQUIREMENT_DISCUSSION,
        "task_status_updated_at": None,
        "queue_position": None,
        "estimated_wait_minutes": None,
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
    }
    values.update(overrides)
    return SessionModel(**values)


def build_message_model(**overrides) -> MessageModel:
    """Transient MessageModel with every column populated."""
    values = {
        "id": 1,
        "session_id": uuid.uuid4(),
        "sender_type": SenderType.VISITOR,
        "content_type": ContentType.TEXT,
        "content": "Hello there",
        "thumbnail_url": None,
        "file_name": None,
        "file_size": None,
        "is_read": False,
        "created_at": BASE_TIME,
    }
    values.update(overrides)
    return MessageModel(**values)


@pytest.fixture
def session_model_factory():
    """Factory for transient SessionModel rows."""
    return build_session_model


@pytest.fixture
def message_model_factory():
    """Factory for transient MessageModel rows."""
    return build_message_model


@pytest.fixture
def insert_session(test_async_db):
    """
    Insert sessions with controlled creation times.

    Returns:
        Callable: async (minutes_offset, **fields) -> SessionModel
    """
    from support_desk.boundary.db.CRUD.session_crud import session_crud

    async def _insert(minutes: int = 0, **fields) -> SessionModel:
        fields.setdefault("visitor_name", f"Visitor{minutes}")
        created = BASE_TIME + timedelta(minutes=minutes)
        fields.setdefault("created_at", created)
        fields.setdefault("updated_at", created)
        row = await session_crud.create(test_async_db, **fields)
        await test_async_db.commit()
        return row

    return _insert


@pytest.fixture
def session_id() -> uuid.UUID:
    """Generate a test session ID."""
    return uuid.uuid4()
