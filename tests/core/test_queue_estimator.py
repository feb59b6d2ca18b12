"""
Test suite for queue arithmetic.

System role: Verification of position and wait-time estimation
"""

import uuid
from datetime import datetime, timedelta

from support_desk.boundary.db.models.session_model import TaskStatus
from support_desk.core.queue_estimator import (
    QueueEntry,
    build_staff_queue,
    estimate_wait_minutes,
    position_in,
)

T0 = datetime(2024, 1, 1, 9, 0, 0)


def entry(minutes: int, status: str, name: str | None = None) -> QueueEntry:
    return QueueEntry(
        session_id=uuid.uuid4(),
        visitor_name=name or f"V{minutes}",
        topic=None,
        task_status=status,
        created_at=T0 + timedelta(minutes=minutes),
    )


class TestEstimateWaitMinutes:
    """Test suite for estimate_wait_minutes()."""

    def test_head_of_queue_waits_zero(self) -> None:
        assert estimate_wait_minutes(1) == 0

    def test_not_queued_waits_zero(self) -> None:
        assert estimate_wait_minutes(0) == 0

    def test_wait_scales_with_sessions_ahead(self) -> None:
        assert estimate_wait_minutes(3) == 10
        assert estimate_wait_minutes(4, avg_handle_minutes=7) == 21


class TestPositionIn:
    """Test suite for position_in()."""

    def test_returns_one_based_index(self) -> None:
        ids = [uuid.uuid4() for _ in range(3)]
        assert position_in(ids, ids[2]) == 3

    def test_returns_zero_for_unknown_session(self) -> None:
        assert position_in([uuid.uuid4()], uuid.uuid4()) == 0


class TestBuildStaffQueue:
    """Test suite for build_staff_queue()."""

    def test_orders_in_progress_then_confirmed_then_discussion(self) -> None:
        # Arrange
        discussion = entry(0, "requirement_discussion", "D")
        confirmed = entry(5, "requirement_confirmed", "C")
        working = entry(10, "in_progress", "W")

        # Act
        items = build_staff_queue([discussion, confirmed, working])

        # Assert
        assert [i["visitor_name"] for i in items] == ["W", "C", "D"]

    def test_in_progress_has_no_position(self) -> None:
        items = build_staff_queue([entry(0, "in_progress")])

        assert items[0]["position"] == 0
        assert items[0]["wait_minutes"] == 0

    def test_waiting_positions_follow_creation_order(self) -> None:
        # Arrange: the older discussion session is ahead of the newer confirmed one
        discussion = entry(0, "requirement_discussion", "D")
        confirmed = entry(5, "requirement_confirmed", "C")

        # Act
        items = {i["visitor_name"]: i for i in build_staff_queue([confirmed, discussion])}

        # Assert
        assert items["D"]["position"] == 1
        assert items["C"]["position"] == 2
        assert items["C"]["wait_minutes"] == 5

    def test_accepts_enum_statuses_and_skips_finished_work(self) -> None:
        items = build_staff_queue([
            entry(0, TaskStatus.REQUIREMENT_CONFIRMED),
            entry(1, TaskStatus.DELIVERED),
            entry(2, TaskStatus.REVIEWED),
        ])

        assert len(items) == 1
        assert items[0]["task_status"] == "requirement_confirmed"
        assert items[0]["position"] == 1
