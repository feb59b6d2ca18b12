"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Connection management
  - SessionModel, MessageModel and their enums
  - session_crud, message_crud: CRUD operation singletons

Dependencies: sqlalchemy, support_desk.configs
System role: Persistent storage for chat sessions and messages
"""

from support_desk.boundary.db.base import Base, TimestampMixin, UUIDMixin
from support_desk.boundary.db.connection import (
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from support_desk.boundary.db.models import (
    ContentType,
    MessageModel,
    SenderType,
    SessionModel,
    SessionStatus,
    TaskStatus,
)
from support_desk.boundary.db.CRUD import (
    BaseCRUD,
    MessageCRUD,
    SessionCRUD,
    message_crud,
    session_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "SessionModel",
    "SessionStatus",
    "TaskStatus",
    "MessageModel",
    "SenderType",
    "ContentType",
    # CRUD
    "BaseCRUD",
    "SessionCRUD",
    "MessageCRUD",
    "session_crud",
    "message_crud",
]
