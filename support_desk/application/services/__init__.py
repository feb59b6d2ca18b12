"""Service orchestrators."""

from .chat_service import ChatService
from .notification_service import NotificationService
from .queue_service import QueueService
from .staff_service import StaffService
from .upload_service import UploadService

__all__ = [
    "ChatService",
    "NotificationService",
    "QueueService",
    "StaffService",
    "UploadService",
]
