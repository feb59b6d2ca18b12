"""
Test suite for the inactive session sweep.

System role: Verification that idle sessions are closed and pushed to
live staff consoles
"""

from datetime import timedelta

import pytest

from support_desk.boundary.db.base import utcnow
from support_desk.core.realtime import EventHub
from support_desk.main import close_inactive_and_notify
from support_desk.models.streaming import StreamEventType


class TestCloseInactiveAndNotify:
    """Test suite for close_inactive_and_notify()."""

    @pytest.mark.asyncio
    async def test_closed_sessions_reach_staff_and_visitor_streams(self, test_async_db, insert_session) -> None:
        # Arrange
        hub = EventHub(write_timeout=0.05, queue_size=10)
        idle = await insert_session(0)
        await insert_session(1, updated_at=utcnow())
        staff = hub.add_staff_client()
        visitor = hub.add_session_client(str(idle.id))
        await staff.receive(timeout=0.01)
        await visitor.receive(timeout=0.01)

        # Act
        count = await close_inactive_and_notify(test_async_db, hub, inactive_days=7, avg_handle_minutes=5)

        # Assert
        assert count == 1
        for connection in (staff, visitor):
            event = await connection.receive(timeout=0.1)
            assert event.event == StreamEventType.SESSION_UPDATE
            assert event.data["session"]["id"] == str(idle.id)
            assert event.data["session"]["status"] == "closed"
            assert await connection.receive(timeout=0.01) is None

    @pytest.mark.asyncio
    async def test_nothing_idle_sends_nothing(self, test_async_db, insert_session) -> None:
        hub = EventHub(write_timeout=0.05, queue_size=10)
        await insert_session(0, updated_at=utcnow() - timedelta(days=1))
        staff = hub.add_staff_client()
        await staff.receive(timeout=0.01)

        count = await close_inactive_and_notify(test_async_db, hub, inactive_days=7, avg_handle_minutes=5)

        assert count == 0
        assert await staff.receive(timeout=0.01) is None
