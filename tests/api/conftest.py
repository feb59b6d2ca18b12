"""
API test fixtures.

Builds the full application (middleware and error envelopes included)
with service dependencies replaced by mocks. Lifespan is not entered, so
no database or background tasks are started.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from support_desk.api.deps import (
    get_chat_service,
    get_event_hub,
    get_notification_service,
    get_queue_service,
    get_staff_service,
    get_upload_service,
)
from support_desk.application.services import (
    ChatService,
    NotificationService,
    QueueService,
    StaffService,
    UploadService,
)
from support_desk.core.realtime import EventHub
from support_desk.main import create_app


@pytest.fixture
def mock_chat_service() -> AsyncMock:
    return AsyncMock(spec=ChatService)


@pytest.fixture
def mock_staff_service() -> AsyncMock:
    return AsyncMock(spec=StaffService)


@pytest.fixture
def mock_queue_service() -> AsyncMock:
    return AsyncMock(spec=QueueService)


@pytest.fixture
def mock_upload_service() -> AsyncMock:
    return AsyncMock(spec=UploadService)


@pytest.fixture
def mock_notification_service() -> AsyncMock:
    return AsyncMock(spec=NotificationService)


@pytest.fixture
def mock_event_hub() -> MagicMock:
    hub = MagicMock(spec=EventHub)
    hub.broadcast_message = AsyncMock(return_value=1)
    hub.broadcast_session_update = AsyncMock(return_value=1)
    return hub


@pytest.fixture
def client(
    mock_chat_service,
    mock_staff_service,
    mock_queue_service,
    mock_upload_service,
    mock_notification_service,
    mock_event_hub,
) -> TestClient:
    """Test client with every service dependency overridden."""
    app = create_app()
    app.dependency_overrides[get_chat_service] = lambda: mock_chat_service
    app.dependency_overrides[get_staff_service] = lambda: mock_staff_service
    app.dependency_overrides[get_queue_service] = lambda: mock_queue_service
    app.dependency_overrides[get_upload_service] = lambda: mock_upload_service
    app.dependency_overrides[get_notification_service] = lambda: mock_notification_service
    app.dependency_overrides[get_event_hub] = lambda: mock_event_hub
    return TestClient(app)
