"""
Integration tests for SessionCRUD against SQLite.

System role: Verification of session persistence queries
"""

from datetime import datetime, timedelta, timezone

import pytest

from sqlalchemy.exc import InvalidRequestError

from support_desk.boundary.db.CRUD.session_crud import session_crud
from support_desk.boundary.db.models.message_model import SenderType
from support_desk.boundary.db.models.session_model import SessionStatus, TaskStatus

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestSessionCrudListing:
    """Test suite for list_by_status()."""

    @pytest.mark.asyncio
    async def test_orders_by_last_message_then_creation(self, test_async_db, insert_session) -> None:
        # Arrange
        quiet_old = await insert_session(0, visitor_name="QuietOld")
        quiet_new = await insert_session(10, visitor_name="QuietNew")
        chatted_early = await insert_session(1, visitor_name="Early", last_message_at=BASE_TIME + timedelta(hours=1))
        chatted_late = await insert_session(2, visitor_name="Late", last_message_at=BASE_TIME + timedelta(hours=2))

        # Act
        rows = await session_crud.list_by_status(test_async_db)

        # Assert
        assert [r.id for r in rows] == [chatted_late.id, chatted_early.id, quiet_new.id, quiet_old.id]

    @pytest.mark.asyncio
    async def test_filters_by_status(self, test_async_db, insert_session) -> None:
        await insert_session(0, status=SessionStatus.CLOSED)
        active = await insert_session(1)

        rows = await session_crud.list_by_status(test_async_db, SessionStatus.ACTIVE)

        assert [r.id for r in rows] == [active.id]


class TestSessionCrudCounters:
    """Test suite for unread counter arithmetic."""

    @pytest.mark.asyncio
    async def test_visitor_message_bumps_staff_counter(self, test_async_db, insert_session) -> None:
        row = await insert_session(0)

        await session_crud.record_message(test_async_db, row.id, SenderType.VISITOR)
        updated = await session_crud.record_message(test_async_db, row.id, SenderType.VISITOR)

        assert updated.unread_by_staff == 2
        assert updated.unread_by_visitor == 0
        assert updated.last_message_at is not None

    @pytest.mark.asyncio
    async def test_staff_message_bumps_visitor_counter(self, test_async_db, insert_session) -> None:
        row = await insert_session(0)

        updated = await session_crud.record_message(test_async_db, row.id, SenderType.STAFF)

        assert updated.unread_by_visitor == 1
        assert updated.unread_by_staff == 0

    @pytest.mark.asyncio
    async def test_record_message_on_missing_session_returns_none(self, test_async_db, session_id) -> None:
        assert await session_crud.record_message(test_async_db, session_id, SenderType.VISITOR) is None

    @pytest.mark.asyncio
    async def test_reset_unread_only_touches_reader(self, test_async_db, insert_session) -> None:
        row = await insert_session(0, unread_by_staff=3, unread_by_visitor=2)

        updated = await session_crud.reset_unread(test_async_db, row.id, SenderType.STAFF)

        assert updated.unread_by_staff == 0
        assert updated.unread_by_visitor == 2

    @pytest.mark.asyncio
    async def test_total_unread_counts_active_sessions_only(self, test_async_db, insert_session) -> None:
        await insert_session(0, unread_by_staff=3)
        await insert_session(1, unread_by_staff=4)
        await insert_session(2, unread_by_staff=10, status=SessionStatus.CLOSED)

        assert await session_crud.total_unread_by_staff(test_async_db) == 7

    @pytest.mark.asyncio
    async def test_total_unread_is_zero_without_sessions(self, test_async_db) -> None:
        assert await session_crud.total_unread_by_staff(test_async_db) == 0


class TestSessionCrudWorkflow:
    """Test suite for topic and task status updates."""

    @pytest.mark.asyncio
    async def test_update_task_status_stamps_change_time(self, test_async_db, insert_session) -> None:
        row = await insert_session(0)

        updated = await session_crud.update_task_status(test_async_db, row.id, TaskStatus.IN_PROGRESS)

        assert updated.task_status == TaskStatus.IN_PROGRESS
        assert updated.task_status_updated_at is not None

    @pytest.mark.asyncio
    async def test_update_topic(self, test_async_db, insert_session) -> None:
        row = await insert_session(0)

        updated = await session_crud.update_topic(test_async_db, row.id, "Landing page")

        assert updated.topic == "Landing page"


class TestSessionCrudQueue:
    """Test suite for queue queries and cached columns."""

    @pytest.mark.asyncio
    async def test_waiting_ids_are_fifo_and_skip_other_states(self, test_async_db, insert_session) -> None:
        # Arrange
        second = await insert_session(5, task_status=TaskStatus.REQUIREMENT_CONFIRMED)
        first = await insert_session(0)
        await insert_session(1, task_status=TaskStatus.IN_PROGRESS)
        await insert_session(2, status=SessionStatus.CLOSED)
        await insert_session(3, task_status=TaskStatus.DELIVERED)

        # Act
        ids = await session_crud.get_waiting_ids(test_async_db)

        # Assert
        assert ids == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_queue_candidates_include_in_progress(self, test_async_db, insert_session) -> None:
        await insert_session(0)
        await insert_session(1, task_status=TaskStatus.IN_PROGRESS)
        await insert_session(2, task_status=TaskStatus.REVIEWED)

        rows = await session_crud.list_queue_candidates(test_async_db)

        assert {r.task_status for r in rows} == {TaskStatus.REQUIREMENT_DISCUSSION, TaskStatus.IN_PROGRESS}

    @pytest.mark.asyncio
    async def test_update_queue_info_stores_zero_as_null(self, test_async_db, insert_session) -> None:
        row = await insert_session(0)

        await session_crud.update_queue_info(test_async_db, row.id, 1, 0)
        await test_async_db.refresh(row)

        assert row.queue_position == 1
        assert row.estimated_wait_minutes is None

    @pytest.mark.asyncio
    async def test_queue_updates_do_not_count_as_activity(self, test_async_db, insert_session) -> None:
        row = await insert_session(0)
        before = row.updated_at

        await session_crud.update_queue_info(test_async_db, row.id, 3, 10)
        await session_crud.clear_queue_info_except(test_async_db, [])
        await test_async_db.refresh(row)

        assert row.updated_at == before
        assert row.queue_position is None

    @pytest.mark.asyncio
    async def test_clear_queue_info_keeps_listed_sessions(self, test_async_db, insert_session) -> None:
        keep = await insert_session(0, queue_position=1)
        drop = await insert_session(1, queue_position=2, estimated_wait_minutes=5)

        cleared = await session_crud.clear_queue_info_except(test_async_db, [keep.id])
        await test_async_db.refresh(keep)
        await test_async_db.refresh(drop)

        assert cleared == 1
        assert keep.queue_position == 1
        assert drop.queue_position is None
        assert drop.estimated_wait_minutes is None


class TestSessionCrudInactivity:
    """Test suite for close_inactive()."""

    @pytest.mark.asyncio
    async def test_closes_only_stale_active_sessions(self, test_async_db, insert_session) -> None:
        # Arrange
        stale = await insert_session(0)
        fresh = await insert_session(0, updated_at=BASE_TIME + timedelta(days=10))
        await insert_session(0, status=SessionStatus.CLOSED)

        # Act
        closed = await session_crud.close_inactive(test_async_db, BASE_TIME + timedelta(days=1))

        # Assert
        assert closed == [stale.id]
        await test_async_db.refresh(fresh)
        assert fresh.status == SessionStatus.ACTIVE


class TestSessionCrudStoredTypes:
    """Test suite for how session columns read back from the database."""

    @pytest.mark.asyncio
    async def test_timestamps_read_back_as_utc(self, test_async_db, insert_session) -> None:
        # Arrange
        plus_two = timezone(timedelta(hours=2))
        chat = await insert_session(0, last_message_at=datetime(2024, 1, 1, 14, 0, tzinfo=plus_two))

        # Act
        [row] = await session_crud.get_by_ids(test_async_db, [chat.id])

        # Assert
        assert row.created_at == BASE_TIME
        assert row.created_at.tzinfo == timezone.utc
        assert row.last_message_at == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert row.last_message_at.utcoffset() == timedelta(0)

    @pytest.mark.asyncio
    async def test_messages_relationship_is_never_lazy_loaded(self, test_async_db, insert_session) -> None:
        chat = await insert_session(0)

        with pytest.raises(InvalidRequestError):
            chat.messages
