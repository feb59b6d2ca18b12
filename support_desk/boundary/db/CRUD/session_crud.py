"""
Session CRUD operations.

Session-specific queries: listing for the staff console, unread counter
arithmetic, workflow updates, and the rows the queue estimator needs.

Dependencies: sqlalchemy, support_desk.boundary.db.models
System role: Session persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.boundary.db.base import utcnow
from support_desk.boundary.db.CRUD.base_crud import BaseCRUD
from support_desk.boundary.db.models.message_model import SenderType
from support_desk.boundary.db.models.session_model import SessionModel, SessionStatus, TaskStatus


class SessionCRUD(BaseCRUD[SessionModel]):
    """CRUD operations for SessionModel."""

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)

    async def list_by_status(
        self,
        session: AsyncSession,
        status: SessionStatus | None = None,
    ) -> Sequence[SessionModel]:
        """
        List sessions, most recently active first.

        Sessions without messages sort after those with messages, then
        newest-created first.

        Args:
            session: Async database session
            status: Optional status filter

        Returns:
            Sequence of SessionModels
        """
        stmt = select(SessionModel).order_by(
            SessionModel.last_message_at.is_(None),
            SessionModel.last_message_at.desc(),
            SessionModel.created_at.desc(),
        )
        if status is not None:
            stmt = stmt.where(SessionModel.status == status)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def record_message(
        self,
        session: AsyncSession,
        id: UUID,
        sender_type: SenderType,
        at: datetime | None = None,
    ) -> SessionModel | None:
        """
        Bump last_message_at and the recipient's unread counter.

        The counter is incremented in SQL so concurrent writers cannot
        lose updates.

        Args:
            session: Async database session
            id: Session UUID
            sender_type: Author of the new message
            at: Message timestamp (defaults to now)

        Returns:
            Updated SessionModel if found, None otherwise
        """
        values: dict = {"last_message_at": at or utcnow()}
        if sender_type == SenderType.VISITOR:
            values["unread_by_staff"] = SessionModel.unread_by_staff + 1
        else:
            values["unread_by_visitor"] = SessionModel.unread_by_visitor + 1
        return await self.update_by_id(session, id, **values)

    async def reset_unread(
        self,
        session: AsyncSession,
        id: UUID,
        reader: SenderType,
    ) -> SessionModel | None:
        """
        Zero the reader's unread counter.

        Args:
            session: Async database session
            id: Session UUID
            reader: Party that read the conversation

        Returns:
            Updated SessionModel if found, None otherwise
        """
        field = "unread_by_visitor" if reader == SenderType.VISITOR else "unread_by_staff"
        return await self.update_by_id(session, id, **{field: 0})

    async def update_topic(
        self,
        session: AsyncSession,
        id: UUID,
        topic: str | None,
    ) -> SessionModel | None:
        return await self.update_by_id(session, id, topic=topic)

    async def update_task_status(
        self,
        session: AsyncSession,
        id: UUID,
        task_status: TaskStatus,
    ) -> SessionModel | None:
        """
        Move a session to a new workflow stage and stamp the change.

        Args:
            session: Async database session
            id: Session UUID
            task_status: New workflow stage

        Returns:
            Updated SessionModel if found, None otherwise
        """
        return await self.update_by_id(
            session, id, task_status=task_status, task_status_updated_at=utcnow()
        )

    async def update_queue_info(
        self,
        session: AsyncSession,
        id: UUID,
        position: int,
        wait_minutes: int,
    ) -> None:
        """
        Store cached queue columns; zero values are stored as NULL.

        updated_at is left untouched so queue bookkeeping does not count
        as session activity.

        Args:
            session: Async database session
            id: Session UUID
            position: 1-based position, 0 when not waiting
            wait_minutes: Estimated wait
        """
        stmt = (
            update(SessionModel)
            .where(SessionModel.id == id)
            .values(
                queue_position=position or None,
                estimated_wait_minutes=wait_minutes or None,
                updated_at=SessionModel.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        await session.execute(stmt)

    async def clear_queue_info_except(
        self,
        session: AsyncSession,
        keep_ids: Sequence[UUID],
    ) -> int:
        """
        Null the cached queue columns of sessions no longer waiting.

        Args:
            session: Async database session
            keep_ids: Waiting session IDs whose columns are left alone

        Returns:
            int: Number of sessions cleared
        """
        stmt = (
            update(SessionModel)
            .where(
                (SessionModel.queue_position.is_not(None))
                | (SessionModel.estimated_wait_minutes.is_not(None))
            )
            .values(
                queue_position=None,
                estimated_wait_minutes=None,
                updated_at=SessionModel.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        if keep_ids:
            stmt = stmt.where(SessionModel.id.not_in(keep_ids))
        result = await session.execute(stmt)
        return result.rowcount or 0

    async def get_waiting_ids(self, session: AsyncSession) -> list[UUID]:
        """
        IDs of sessions waiting for staff, oldest first.

        Waiting means ACTIVE with a discussion or confirmed task status.

        Args:
            session: Async database session

        Returns:
            list[UUID]: Session IDs in FIFO order
        """
        stmt = (
            select(SessionModel.id)
            .where(
                SessionModel.status == SessionStatus.ACTIVE,
                SessionModel.task_status.in_(TaskStatus.waiting()),
            )
            .order_by(SessionModel.created_at.asc(), SessionModel.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def list_queue_candidates(self, session: AsyncSession) -> Sequence[SessionModel]:
        """
        Active sessions that belong in the staff queue view.

        Includes waiting sessions and those already in progress.

        Args:
            session: Async database session

        Returns:
            Sequence of SessionModels ordered by creation time
        """
        stmt = (
            select(SessionModel)
            .where(
                SessionModel.status == SessionStatus.ACTIVE,
                SessionModel.task_status.in_(
                    (*TaskStatus.waiting(), TaskStatus.IN_PROGRESS)
                ),
            )
            .order_by(SessionModel.created_at.asc(), SessionModel.id.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def total_unread_by_staff(self, session: AsyncSession) -> int:
        """
        Sum of staff unread counters across active sessions.

        Args:
            session: Async database session

        Returns:
            int: Total unread visitor messages (0 when there are none)
        """
        stmt = select(func.coalesce(func.sum(SessionModel.unread_by_staff), 0)).where(
            SessionModel.status == SessionStatus.ACTIVE
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def get_by_ids(self, session: AsyncSession, ids: Sequence[UUID]) -> Sequence[SessionModel]:
        """Load sessions by ID, refreshing any copies already in the identity map."""
        if not ids:
            return []
        stmt = (
            select(SessionModel)
            .where(SessionModel.id.in_(ids))
            .order_by(SessionModel.created_at.asc())
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def close_inactive(self, session: AsyncSession, cutoff: datetime) -> list[UUID]:
        """
        Close active sessions not updated since `cutoff`.

        Args:
            session: Async database session
            cutoff: Sessions with updated_at before this are closed

        Returns:
            list[UUID]: IDs of sessions that were closed
        """
        stmt = (
            update(SessionModel)
            .where(
                SessionModel.status == SessionStatus.ACTIVE,
                SessionModel.updated_at < cutoff,
            )
            .values(status=SessionStatus.CLOSED)
            .returning(SessionModel.id)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())


session_crud = SessionCRUD()
