"""
Message CRUD operations.

Cursor pagination over the integer message ID, read receipts, and
last-message lookups for the staff session list.

Dependencies: sqlalchemy, support_desk.boundary.db.models
System role: Message persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.boundary.db.CRUD.base_crud import BaseCRUD
from support_desk.boundary.db.models.message_model import MessageModel, SenderType


class MessageCRUD(BaseCRUD[MessageModel]):
    """CRUD operations for MessageModel."""

    def __init__(self) -> None:
        """Initialize MessageCRUD with MessageModel."""
        super().__init__(MessageModel)

    async def get_page(
        self,
        session: AsyncSession,
        session_id: UUID,
        before: int | None = None,
        limit: int = 20,
    ) -> tuple[list[MessageModel], bool]:
        """
        Fetch one page of history, walking backwards from `before`.

        Reads `limit + 1` rows newest-first to learn whether older
        messages remain, then returns the page oldest-first.

        Args:
            session: Async database session
            session_id: Session UUID
            before: Only messages with id < before (None or 0 for the latest page)
            limit: Page size

        Returns:
            tuple: (messages ascending by id, has_more)
        """
        stmt = select(MessageModel).where(MessageModel.session_id == session_id)
        if before:
            stmt = stmt.where(MessageModel.id < before)
        stmt = stmt.order_by(MessageModel.id.desc()).limit(limit + 1)

        result = await session.execute(stmt)
        rows = list(result.scalars().all())
        has_more = len(rows) > limit
        page = rows[:limit]
        page.reverse()
        return page, has_more

    async def mark_read_from(
        self,
        session: AsyncSession,
        session_id: UUID,
        sender_type: SenderType,
    ) -> int:
        """
        Mark every unread message written by `sender_type` as read.

        Args:
            session: Async database session
            session_id: Session UUID
            sender_type: Author whose messages are being read

        Returns:
            int: Number of messages flipped
        """
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.session_id == session_id,
                MessageModel.sender_type == sender_type,
                MessageModel.is_read.is_(False),
            )
            .values(is_read=True)
            .execution_options(synchronize_session="fetch")
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    async def get_latest(self, session: AsyncSession, session_id: UUID) -> MessageModel | None:
        stmt = (
            select(MessageModel)
            .where(MessageModel.session_id == session_id)
            .order_by(MessageModel.id.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_latest_for_sessions(
        self,
        session: AsyncSession,
        session_ids: Sequence[UUID],
    ) -> dict[UUID, MessageModel]:
        """
        Most recent message of each session in one query.

        Args:
            session: Async database session
            session_ids: Sessions to look up

        Returns:
            dict: session_id -> latest MessageModel (sessions without messages omitted)
        """
        if not session_ids:
            return {}
        latest_ids = (
            select(func.max(MessageModel.id).label("id"))
            .where(MessageModel.session_id.in_(session_ids))
            .group_by(MessageModel.session_id)
            .subquery()
        )
        stmt = select(MessageModel).join(latest_ids, MessageModel.id == latest_ids.c.id)
        result = await session.execute(stmt)
        return {message.session_id: message for message in result.scalars().all()}


message_crud = MessageCRUD()
