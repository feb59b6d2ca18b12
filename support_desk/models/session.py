"""
Session API schemas.

Dependencies: pydantic
System role: Session request/response contracts
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from support_desk.boundary.db.models.message_model import ContentType
from support_desk.boundary.db.models.session_model import SessionStatus, TaskStatus
from support_desk.models.common import ApiModel


class CreateSessionRequest(ApiModel):
    """
    Create-or-resume request from the visitor widget.

    Attributes:
        visitor_name: Optional display name (generated when blank)
        session_id: Existing session to resume, or the ID to create with
    """

    visitor_name: str | None = Field(default=None, max_length=50)
    session_id: UUID | None = None

    @field_validator("visitor_name")
    @classmethod
    def blank_name_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None


class SessionResponse(ApiModel):
    """Full session state."""

    id: UUID
    visitor_name: str
    status: SessionStatus
    last_message_at: datetime | None = None
    unread_by_visitor: int = 0
    unread_by_staff: int = 0
    topic: str | None = None
    task_status: TaskStatus
    task_status_updated_at: datetime | None = None
    queue_position: int | None = None
    estimated_wait_minutes: int | None = None
    created_at: datetime
    updated_at: datetime


class LastMessagePreview(ApiModel):
    """Trimmed view of a session's latest message."""

    content: str
    content_type: ContentType
    created_at: datetime


class SessionListItem(SessionResponse):
    """Session row in the staff console list."""

    last_message: LastMessagePreview | None = None


class SessionDetailResponse(ApiModel):
    """Single session with its latest message."""

    session: SessionResponse
    last_message: LastMessagePreview | None = None


class UpdateTopicRequest(ApiModel):
    topic: str


class UpdateTaskStatusRequest(ApiModel):
    task_status: TaskStatus


class UnreadCountResponse(ApiModel):
    count: int
