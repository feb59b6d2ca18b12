"""
Chat message ORM model.

Messages are append-only; the only mutation is flipping `is_read`. The
integer primary key is monotonic and doubles as the pagination cursor.

Dependencies: sqlalchemy, support_desk.boundary.db.base
System role: Message persistence
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Enum, ForeignKey, Integer, String, Text, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from support_desk.boundary.db.base import Base, UTCDateTime, utcnow


class SenderType(str, enum.Enum):
    """Who wrote a message."""

    VISITOR = "visitor"
    STAFF = "staff"

    @property
    def counterpart(self) -> "SenderType":
        """The other party in the conversation."""
        return SenderType.STAFF if self is SenderType.VISITOR else SenderType.VISITOR


class ContentType(str, enum.Enum):
    """
    Message payload kind.

    TEXT content is the message body; for the other kinds content is the
    public URL of the stored file.
    """

    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    FILE = "file"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class MessageModel(Base):
    """
    Single chat message.

    Attributes:
        id: Autoincrement integer primary key (cursor for pagination)
        session_id: Owning session (cascade delete)
        sender_type: VISITOR or STAFF
        content_type: TEXT, IMAGE, VIDEO or FILE
        content: Text body or file URL
        thumbnail_url: Optional preview image URL
        file_name: Original upload file name
        file_size: Upload size in bytes
        is_read: Whether the recipient has read it
        created_at: Creation timestamp (UTC)
    """

    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    sender_type: Mapped[SenderType] = mapped_column(
        Enum(SenderType, native_enum=False, values_callable=_enum_values, length=16),
        nullable=False,
    )
    content_type: Mapped[ContentType] = mapped_column(
        Enum(ContentType, native_enum=False, values_callable=_enum_values, length=16),
        nullable=False,
        default=ContentType.TEXT,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    thumbnail_url: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    file_name: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)
    file_size: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)

    is_read: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        nullable=False,
        index=True,
    )

    session = relationship("SessionModel", back_populates="messages", lazy="raise")
