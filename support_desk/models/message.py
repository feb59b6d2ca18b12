"""
Message API schemas.

Dependencies: pydantic
System role: Message request/response contracts
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from support_desk.boundary.db.models.message_model import ContentType, SenderType
from support_desk.models.common import ApiModel

MAX_CONTENT_LENGTH = 10000
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class SendMessageRequest(ApiModel):
    """
    New message from either party.

    For non-text messages `content` is the URL returned by the upload
    endpoint.
    """

    session_id: UUID
    content_type: ContentType = ContentType.TEXT
    content: str = Field(min_length=1, max_length=MAX_CONTENT_LENGTH)
    thumbnail_url: str | None = None
    file_name: str | None = Field(default=None, max_length=255)
    file_size: int | None = Field(default=None, ge=0)


class MessageResponse(ApiModel):
    """Stored chat message."""

    id: int
    session_id: UUID
    sender_type: SenderType
    content_type: ContentType
    content: str
    thumbnail_url: str | None = None
    file_name: str | None = None
    file_size: int | None = None
    is_read: bool = False
    created_at: datetime


class MessagePageResponse(ApiModel):
    """One page of history, oldest first."""

    success: bool = True
    data: list[MessageResponse]
    has_more: bool
