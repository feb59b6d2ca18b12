"""
Waiting queue arithmetic.

Pure functions over session rows: who is waiting, where they stand,
and how long they can expect to wait. Persistence lives in
QueueService; this module never touches the database.

Dependencies: None (pure domain layer)
System role: Queue position and wait-time estimation
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence
from uuid import UUID

DEFAULT_AVG_HANDLE_MINUTES = 5

# Task statuses that count as waiting for staff.
WAITING_TASK_STATUSES = ("requirement_discussion", "requirement_confirmed")
IN_PROGRESS_TASK_STATUS = "in_progress"

# Staff queue view: in-progress work first, then confirmed, then discussion.
_STAFF_ORDER = {
    IN_PROGRESS_TASK_STATUS: 0,
    "requirement_confirmed": 1,
    "requirement_discussion": 2,
}


@dataclass(frozen=True)
class QueueEntry:
    """Minimal session view used for queue calculations."""

    session_id: UUID
    visitor_name: str
    topic: str | None
    task_status: str
    created_at: datetime

    def __post_init__(self) -> None:
        # Store plain strings; str-valued enum members hash by name.
        object.__setattr__(self, "task_status", getattr(self.task_status, "value", self.task_status))


def estimate_wait_minutes(position: int, avg_handle_minutes: int = DEFAULT_AVG_HANDLE_MINUTES) -> int:
    """
    Estimate minutes until staff reach a session at `position`.

    The head of the queue (position 1) and sessions not queued (0) wait
    zero minutes.

    Args:
        position: 1-based queue position, 0 when not waiting
        avg_handle_minutes: Average minutes per session ahead

    Returns:
        int: Estimated wait in minutes
    """
    if position <= 1:
        return 0
    return (position - 1) * avg_handle_minutes


def position_in(waiting_ids: Sequence[UUID], session_id: UUID) -> int:
    """
    1-based index of `session_id` in the ordered waiting list.

    Args:
        waiting_ids: Waiting session IDs ordered by creation time
        session_id: Session to locate

    Returns:
        int: Position, or 0 when the session is not waiting
    """
    try:
        return list(waiting_ids).index(session_id) + 1
    except ValueError:
        return 0


def build_staff_queue(
    entries: Iterable[QueueEntry],
    avg_handle_minutes: int = DEFAULT_AVG_HANDLE_MINUTES,
) -> list[dict]:
    """
    Order sessions for the staff queue view and annotate positions.

    In-progress sessions are listed first with position 0. Waiting
    sessions keep the position they have in the visitor-facing FIFO
    (creation order across both waiting statuses), so the number staff
    see matches what the visitor sees.

    Args:
        entries: Active sessions in any of the queue-relevant task statuses
        avg_handle_minutes: Average minutes per session ahead

    Returns:
        list[dict]: Queue items in display order
    """
    entries = [e for e in entries if e.task_status in _STAFF_ORDER]
    fifo = sorted(
        (e for e in entries if e.task_status in WAITING_TASK_STATUSES),
        key=lambda e: (e.created_at, e.session_id),
    )
    positions = {e.session_id: index + 1 for index, e in enumerate(fifo)}

    ordered = sorted(
        entries,
        key=lambda e: (_STAFF_ORDER[e.task_status], e.created_at, e.session_id),
    )

    items = []
    for entry in ordered:
        position = positions.get(entry.session_id, 0)
        items.append({
            "session_id": entry.session_id,
            "visitor_name": entry.visitor_name,
            "topic": entry.topic,
            "task_status": entry.task_status,
            "position": position,
            "wait_minutes": estimate_wait_minutes(position, avg_handle_minutes),
            "created_at": entry.created_at,
        })
    return items
