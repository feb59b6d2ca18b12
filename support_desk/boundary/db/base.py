"""
SQLAlchemy declarative base and common mixins.

Provides base class for all ORM models and reusable mixins
for common fields (timestamps, UUIDs).

Dependencies: sqlalchemy
System role: Foundation for all database models
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timestamp column that always round-trips as an aware UTC datetime.

    SQLite stores DATETIME as text without an offset, so values read
    back are naive. Naive values are taken to be UTC in both directions.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for ORM model registration.

    All database models inherit from this class to ensure they're
    registered with the metadata and included in table creation.
    """

    pass


class UUIDMixin:
    """
    Mixin providing a UUID primary key.

    Uses the generic `Uuid` type: native UUID on PostgreSQL, CHAR(32) on
    SQLite. Callers may supply their own ID (visitors resume sessions by
    ID); otherwise a v4 UUID is generated on insert.

    Attributes:
        id: UUID v4 primary key
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )


class TimestampMixin:
    """
    Mixin providing automatic timestamp tracking.

    created_at is set once on row creation and never changes.
    updated_at is refreshed on every update via onupdate hook.

    Attributes:
        created_at: Row creation timestamp (UTC, immutable)
        updated_at: Last modification timestamp (UTC, auto-updated)
    """

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
