"""
Queue API schemas.

Dependencies: pydantic
System role: Queue position and staff queue contracts
"""

from datetime import datetime
from uuid import UUID

from support_desk.boundary.db.models.session_model import TaskStatus
from support_desk.models.common import ApiModel


class QueueInfoResponse(ApiModel):
    """
    Visitor-facing queue position.

    Attributes:
        position: 1-based position, 0 when not waiting
        estimated_wait_minutes: Estimated minutes until staff pick it up
        total_in_queue: Number of sessions currently waiting
    """

    position: int
    estimated_wait_minutes: int
    total_in_queue: int


class QueueItemResponse(ApiModel):
    """Row in the staff queue view."""

    session_id: UUID
    visitor_name: str
    topic: str | None = None
    task_status: TaskStatus
    position: int
    wait_minutes: int
    created_at: datetime
