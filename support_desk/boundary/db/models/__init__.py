"""
Database models package.

Exports:
  - SessionModel, SessionStatus, TaskStatus: Chat session and its enums
  - MessageModel, SenderType, ContentType: Chat message and its enums

Dependencies: sqlalchemy, support_desk.boundary.db.base
System role: Database model definitions for domain entities
"""

from support_desk.boundary.db.models.session_model import SessionModel, SessionStatus, TaskStatus
from support_desk.boundary.db.models.message_model import ContentType, MessageModel, SenderType

__all__ = [
    "SessionModel",
    "SessionStatus",
    "TaskStatus",
    "MessageModel",
    "SenderType",
    "ContentType",
]
