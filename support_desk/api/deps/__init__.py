"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    ServiceCache,
    get_chat_service,
    get_event_hub,
    get_notification_service,
    get_queue_service,
    get_service_cache,
    get_settings_dependency,
    get_staff_service,
    get_upload_service,
)

__all__ = [
    "ServiceCache",
    "get_chat_service",
    "get_event_hub",
    "get_notification_service",
    "get_queue_service",
    "get_service_cache",
    "get_settings_dependency",
    "get_staff_service",
    "get_upload_service",
]
