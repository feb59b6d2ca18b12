"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from support_desk.boundary.db.CRUD import session_crud, message_crud

    chat_session = await session_crud.get_by_id(db, session_id)
"""

from support_desk.boundary.db.CRUD.base_crud import BaseCRUD
from support_desk.boundary.db.CRUD.message_crud import MessageCRUD, message_crud
from support_desk.boundary.db.CRUD.session_crud import SessionCRUD, session_crud

__all__ = [
    "BaseCRUD",
    "SessionCRUD",
    "session_crud",
    "MessageCRUD",
    "message_crud",
]
