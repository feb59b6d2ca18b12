"""
Dependency injection container.

Factory functions for FastAPI dependencies. Request-scoped services get a
fresh AsyncSession; process-wide singletons (event hub, storage, push
client) live in the ServiceCache.

Dependencies: support_desk.configs, support_desk.application, support_desk.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.application.services import (
    ChatService,
    NotificationService,
    QueueService,
    StaffService,
    UploadService,
)
from support_desk.boundary.db import get_async_db
from support_desk.configs import Settings, get_settings
from support_desk.core.realtime import EventHub


class ServiceCache:
    """Container for process-wide singletons."""

    def __init__(self):
        self._event_hub = None
        self._file_storage = None
        self._bark_client = None

    @property
    def event_hub(self) -> EventHub:
        """Get cached SSE event hub."""
        if self._event_hub is None:
            realtime = get_settings().realtime
            self._event_hub = EventHub(
                write_timeout=realtime.write_timeout_seconds,
                queue_size=realtime.queue_size,
            )
        return self._event_hub

    @property
    def file_storage(self):
        """Get cached attachment storage backend."""
        if self._file_storage is None:
            from support_desk.boundary.storage import create_file_storage

            self._file_storage = create_file_storage(get_settings().storage)
        return self._file_storage

    @property
    def bark_client(self):
        """Get cached Bark client, None when no key is configured."""
        if self._bark_client is None:
            notifications = get_settings().notifications
            if not notifications.enabled:
                return None
            from support_desk.boundary.push import BarkClient

            self._bark_client = BarkClient(
                key=notifications.key,
                api_url=notifications.api_url,
                sound=notifications.sound,
                group=notifications.group,
                timeout=notifications.timeout_seconds,
                max_attempts=notifications.max_attempts,
            )
        return self._bark_client

    def clear(self) -> None:
        """Clear all cached instances."""
        self._event_hub = None
        self._file_storage = None
        self._bark_client = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_queue_service(db: AsyncSession = Depends(get_async_db)) -> QueueService:
    """
    Get queue service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        QueueService: Queue service using the configured handling time
    """
    return QueueService(db=db, avg_handle_minutes=get_settings().queue.avg_handle_minutes)


def get_chat_service(
    db: AsyncSession = Depends(get_async_db),
    queue_service: QueueService = Depends(get_queue_service),
) -> ChatService:
    """
    Get chat service instance.

    Args:
        db: Async database session (injected via Depends)
        queue_service: Queue service sharing the same session

    Returns:
        ChatService: Chat service instance
    """
    return ChatService(db=db, queue_service=queue_service)


def get_staff_service(
    db: AsyncSession = Depends(get_async_db),
    queue_service: QueueService = Depends(get_queue_service),
) -> StaffService:
    """
    Get staff service instance.

    Args:
        db: Async database session (injected via Depends)
        queue_service: Queue service sharing the same session

    Returns:
        StaffService: Staff service instance
    """
    return StaffService(db=db, queue_service=queue_service)


def get_upload_service() -> UploadService:
    """Get upload service bound to the configured storage backend."""
    cache = get_service_cache()
    return UploadService(storage=cache.file_storage, settings=get_settings().storage)


def get_notification_service() -> NotificationService:
    """Get notification service; a no-op sender when Bark is not configured."""
    notifications = get_settings().notifications
    return NotificationService(
        client=get_service_cache().bark_client,
        staff_url_base=notifications.staff_url_base,
        preview_length=notifications.preview_length,
    )


def get_event_hub() -> EventHub:
    """Get the process-wide SSE event hub."""
    return get_service_cache().event_hub
