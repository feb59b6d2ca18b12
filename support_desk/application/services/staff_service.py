"""
Staff service orchestrator.

Staff console use cases: session lists with message previews, unread
totals, topic and workflow updates, and closing idle sessions.

Dependencies: support_desk.boundary.db.CRUD, support_desk.application.services.queue_service
System role: Staff console use case orchestration
"""

import logging
from datetime import timedelta
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.application.services.queue_service import QueueService
from support_desk.boundary.db.base import utcnow
from support_desk.boundary.db.CRUD.message_crud import message_crud
from support_desk.boundary.db.CRUD.session_crud import session_crud
from support_desk.boundary.db.models.message_model import MessageModel
from support_desk.boundary.db.models.session_model import SessionModel, SessionStatus, TaskStatus
from support_desk.core.exceptions import SessionNotFoundError, ValidationError

logger = logging.getLogger(__name__)


class StaffService:
    """Staff-side session management."""

    def __init__(self, db: AsyncSession, queue_service: QueueService | None = None) -> None:
        """
        Args:
            db: Async SQLAlchemy session
            queue_service: Queue service sharing the same session
        """
        self.db = db
        self.queue_service = queue_service or QueueService(db)

    async def list_sessions_with_preview(
        self,
        status: SessionStatus | None = None,
    ) -> list[tuple[SessionModel, MessageModel | None]]:
        """
        Sessions ordered by recent activity, each with its latest message.

        Args:
            status: Optional status filter

        Returns:
            list: (session, latest message or None) pairs
        """
        sessions: Sequence[SessionModel] = await session_crud.list_by_status(self.db, status)
        latest = await message_crud.get_latest_for_sessions(self.db, [s.id for s in sessions])
        return [(s, latest.get(s.id)) for s in sessions]

    async def get_session_with_preview(
        self,
        session_id: UUID,
    ) -> tuple[SessionModel, MessageModel | None]:
        """
        Raises:
            SessionNotFoundError: If the session does not exist
        """
        chat_session = await session_crud.get_by_id(self.db, session_id)
        if chat_session is None:
            raise SessionNotFoundError(str(session_id))
        return chat_session, await message_crud.get_latest(self.db, session_id)

    async def get_total_unread_count(self) -> int:
        """Unread visitor messages across all active sessions."""
        return await session_crud.total_unread_by_staff(self.db)

    async def update_session_topic(self, session_id: UUID, topic: str) -> SessionModel:
        """
        Set the staff-facing topic of a session.

        Args:
            session_id: Session UUID
            topic: New topic (blank clears it)

        Returns:
            SessionModel: Updated session

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        topic = topic.strip() or None
        chat_session = await session_crud.update_topic(self.db, session_id, topic)
        if chat_session is None:
            await self.db.rollback()
            raise SessionNotFoundError(str(session_id))
        await self.db.commit()
        logger.info("Session topic updated", extra={"session_id": str(session_id)})
        return chat_session

    async def update_task_status(self, session_id: UUID, task_status: TaskStatus | str) -> SessionModel:
        """
        Move a session through the workflow and refresh the queue.

        Args:
            session_id: Session UUID
            task_status: New workflow stage

        Returns:
            SessionModel: Updated session with fresh queue columns

        Raises:
            ValidationError: If the status is not a known workflow stage
            SessionNotFoundError: If the session does not exist
        """
        try:
            task_status = TaskStatus(task_status)
        except ValueError as e:
            raise ValidationError("Invalid task status", field="taskStatus") from e

        chat_session = await session_crud.update_task_status(self.db, session_id, task_status)
        if chat_session is None:
            await self.db.rollback()
            raise SessionNotFoundError(str(session_id))

        await self.queue_service.recalculate_all_queue_info()
        await self.db.commit()
        await self.db.refresh(chat_session)

        logger.info(
            "Session task status updated",
            extra={"session_id": str(session_id), "task_status": task_status.value},
        )
        return chat_session

    async def close_inactive_sessions(self, inactive_days: int) -> Sequence[SessionModel]:
        """
        Close active sessions with no activity for `inactive_days`.

        Args:
            inactive_days: Idle threshold in days (must be positive)

        Returns:
            Sequence[SessionModel]: Sessions that were closed, as stored
        """
        if inactive_days <= 0:
            return []
        cutoff = utcnow() - timedelta(days=inactive_days)
        closed_ids = await session_crud.close_inactive(self.db, cutoff)
        if not closed_ids:
            return []
        await self.queue_service.recalculate_all_queue_info()
        await self.db.commit()
        logger.info(
            "Closed inactive sessions",
            extra={"count": len(closed_ids), "inactive_days": inactive_days},
        )
        return await session_crud.get_by_ids(self.db, closed_ids)
