"""
Chat session ORM model.

One row per visitor conversation. Carries denormalized unread counters
for each party and the staff-managed task workflow with its cached
queue position.

Dependencies: sqlalchemy, support_desk.boundary.db.base
System role: Session persistence for visitor conversations
"""

import enum
from datetime import datetime

from sqlalchemy import Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from support_desk.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin


class SessionStatus(str, enum.Enum):
    """
    Conversation lifecycle.

    ACTIVE: Open; visible to staff and counted for unread totals
    CLOSED: Archived (manually or by the inactivity sweep); never deleted
    """

    ACTIVE = "active"
    CLOSED = "closed"


class TaskStatus(str, enum.Enum):
    """
    Staff workflow stage for the visitor's request.

    REQUIREMENT_DISCUSSION and REQUIREMENT_CONFIRMED are waiting stages
    and place the session in the FIFO queue. IN_PROGRESS is being worked
    on. DELIVERED and REVIEWED are finished.
    """

    REQUIREMENT_DISCUSSION = "requirement_discussion"
    REQUIREMENT_CONFIRMED = "requirement_confirmed"
    IN_PROGRESS = "in_progress"
    DELIVERED = "delivered"
    REVIEWED = "reviewed"

    @classmethod
    def waiting(cls) -> tuple["TaskStatus", ...]:
        return (cls.REQUIREMENT_DISCUSSION, cls.REQUIREMENT_CONFIRMED)


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class SessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Visitor chat session.

    Attributes:
        id: UUID primary key (client-supplied or generated)
        visitor_name: Display name (generated when the visitor gives none)
        status: ACTIVE or CLOSED
        last_message_at: Time of the most recent message in either direction
        unread_by_visitor: Staff messages the visitor has not read
        unread_by_staff: Visitor messages staff have not read
        topic: Staff-assigned subject line
        task_status: Workflow stage, drives queue membership
        task_status_updated_at: When task_status last changed
        queue_position: Cached 1-based queue position (NULL when not waiting)
        estimated_wait_minutes: Cached wait estimate (NULL when zero)
        messages: One-to-many with MessageModel (cascade delete)
    """

    __tablename__ = "sessions"

    visitor_name: Mapped[str] = mapped_column(String(50), nullable=False)

    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, native_enum=False, values_callable=_enum_values, length=16),
        nullable=False,
        default=SessionStatus.ACTIVE,
        index=True,
    )

    last_message_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime(),
        nullable=True,
        default=None,
    )

    unread_by_visitor: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    unread_by_staff: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    topic: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    task_status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, native_enum=False, values_callable=_enum_values, length=32),
        nullable=False,
        default=TaskStatus.REQUIREMENT_DISCUSSION,
        index=True,
    )
    task_status_updated_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime(),
        nullable=True,
        default=None,
    )

    queue_position: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
    estimated_wait_minutes: Mapped[int | None] = mapped_column(
        Integer, nullable=True, default=None
    )

    messages = relationship(
        "MessageModel",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )
