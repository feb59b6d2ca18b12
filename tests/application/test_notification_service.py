"""
Test suite for NotificationService.

System role: Verification of staff push alert composition and failure isolation
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from support_desk.application.services.notification_service import NotificationService
from support_desk.boundary.db.models.message_model import ContentType
from support_desk.boundary.push.bark_client import BarkClient
from support_desk.core.exceptions import NotificationError


@pytest.fixture
def mock_bark_client() -> MagicMock:
    client = MagicMock(spec=BarkClient)
    client.push = AsyncMock()
    return client


@pytest.fixture
def notification_service(mock_bark_client) -> NotificationService:
    return NotificationService(mock_bark_client, staff_url_base="https://desk.example.com/staff")


class TestBuildPreview:
    """Test suite for build_preview()."""

    def test_short_text_is_unchanged(self, notification_service) -> None:
        assert notification_service.build_preview("Hi!", ContentType.TEXT) == "Hi!"

    def test_long_text_is_clipped(self, notification_service) -> None:
        preview = notification_service.build_preview("x" * 60, "text")

        assert preview == "x" * 50 + "..."

    @pytest.mark.parametrize(
        ("content_type", "label"),
        [(ContentType.IMAGE, "[Image]"), (ContentType.VIDEO, "[Video]"), ("file", "[File]")],
    )
    def test_attachments_use_labels(self, notification_service, content_type, label) -> None:
        assert notification_service.build_preview("/uploads/a.bin", content_type) == label


class TestNotifyVisitorMessage:
    """Test suite for notify_visitor_message()."""

    @pytest.mark.asyncio
    async def test_pushes_title_body_and_click_url(self, notification_service, mock_bark_client) -> None:
        # Act
        sent = await notification_service.notify_visitor_message("abc", "CalmOwl42", "Need help", "text")

        # Assert
        assert sent is True
        mock_bark_client.push.assert_awaited_once_with(
            "💬 CalmOwl42",
            "Need help",
            url="https://desk.example.com/staff?s=abc",
        )

    @pytest.mark.asyncio
    async def test_disabled_without_client(self) -> None:
        service = NotificationService(None)

        assert service.enabled is False
        assert await service.notify_visitor_message("abc", "V", "hi", ContentType.TEXT) is False

    @pytest.mark.asyncio
    async def test_bark_failure_is_swallowed(self, notification_service, mock_bark_client) -> None:
        mock_bark_client.push.side_effect = NotificationError("Bark request failed")

        assert await notification_service.notify_visitor_message("abc", "V", "hi", "text") is False

    @pytest.mark.asyncio
    async def test_unexpected_failure_is_swallowed(self, notification_service, mock_bark_client) -> None:
        mock_bark_client.push.side_effect = RuntimeError("boom")

        assert await notification_service.notify_visitor_message("abc", "V", "hi", "text") is False
