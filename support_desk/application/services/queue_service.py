"""
Queue service.

Computes visitor queue positions and wait estimates from the database
and keeps the cached queue columns on each session current.

Dependencies: support_desk.boundary.db.CRUD, support_desk.core.queue_estimator
System role: Waiting queue use cases
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.boundary.db.CRUD.session_crud import session_crud
from support_desk.core.queue_estimator import (
    DEFAULT_AVG_HANDLE_MINUTES,
    QueueEntry,
    build_staff_queue,
    estimate_wait_minutes,
    position_in,
)

logger = logging.getLogger(__name__)


class QueueService:
    """Queue position and wait estimation over active sessions."""

    def __init__(
        self,
        db: AsyncSession,
        avg_handle_minutes: int = DEFAULT_AVG_HANDLE_MINUTES,
    ) -> None:
        """
        Args:
            db: Async SQLAlchemy session
            avg_handle_minutes: Average minutes staff spend per session
        """
        self.db = db
        self.avg_handle_minutes = avg_handle_minutes

    async def calculate_queue_position(self, session_id: UUID) -> int:
        """
        1-based position among waiting sessions, 0 when not waiting.

        Args:
            session_id: Session UUID

        Returns:
            int: Queue position
        """
        waiting_ids = await session_crud.get_waiting_ids(self.db)
        return position_in(waiting_ids, session_id)

    async def estimate_wait_time(self, session_id: UUID) -> int:
        """Estimated minutes until staff reach the session."""
        position = await self.calculate_queue_position(session_id)
        return estimate_wait_minutes(position, self.avg_handle_minutes)

    async def get_queue_info(self, session_id: UUID) -> dict:
        """
        Queue snapshot for the visitor widget.

        Args:
            session_id: Session UUID

        Returns:
            dict: position, estimated_wait_minutes, total_in_queue
        """
        waiting_ids = await session_crud.get_waiting_ids(self.db)
        position = position_in(waiting_ids, session_id)
        return {
            "position": position,
            "estimated_wait_minutes": estimate_wait_minutes(position, self.avg_handle_minutes),
            "total_in_queue": len(waiting_ids),
        }

    async def get_queue_list(self) -> list[dict]:
        """
        Staff queue: in-progress sessions first, then waiting sessions.

        Returns:
            list[dict]: Queue items in display order
        """
        rows = await session_crud.list_queue_candidates(self.db)
        entries = [
            QueueEntry(
                session_id=row.id,
                visitor_name=row.visitor_name,
                topic=row.topic,
                task_status=row.task_status,
                created_at=row.created_at,
            )
            for row in rows
        ]
        return build_staff_queue(entries, self.avg_handle_minutes)

    async def update_session_queue_info(self, session_id: UUID) -> tuple[int, int]:
        """
        Refresh one session's cached queue columns. Does not commit.

        Args:
            session_id: Session UUID

        Returns:
            tuple: (position, wait_minutes)
        """
        position = await self.calculate_queue_position(session_id)
        wait = estimate_wait_minutes(position, self.avg_handle_minutes)
        await session_crud.update_queue_info(self.db, session_id, position, wait)
        return position, wait

    async def recalculate_all_queue_info(self) -> int:
        """
        Refresh cached queue columns for every session. Does not commit.

        Waiting sessions get their current position; sessions that left
        the queue are cleared.

        Returns:
            int: Number of waiting sessions
        """
        waiting_ids = await session_crud.get_waiting_ids(self.db)
        for index, session_id in enumerate(waiting_ids):
            position = index + 1
            await session_crud.update_queue_info(
                self.db,
                session_id,
                position,
                estimate_wait_minutes(position, self.avg_handle_minutes),
            )
        cleared = await session_crud.clear_queue_info_except(self.db, waiting_ids)
        logger.debug(
            "Queue info recalculated",
            extra={"waiting": len(waiting_ids), "cleared": cleared},
        )
        return len(waiting_ids)
