"""
Notification service.

Alerts staff about new visitor messages through Bark. Notifications are
a side channel: every failure is logged and swallowed so chat writes
never depend on the push provider.

Dependencies: support_desk.boundary.push
System role: Staff push alerts
"""

import logging
from urllib.parse import urlencode

from support_desk.boundary.db.models.message_model import ContentType
from support_desk.boundary.push.bark_client import BarkClient
from support_desk.core.exceptions import NotificationError
from support_desk.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)

_MEDIA_LABELS = {
    ContentType.IMAGE: "[Image]",
    ContentType.VIDEO: "[Video]",
    ContentType.FILE: "[File]",
}


class NotificationService:
    """Builds and sends visitor-message alerts."""

    def __init__(
        self,
        client: BarkClient | None,
        staff_url_base: str = "http://localhost:3010/staff",
        preview_length: int = 50,
    ) -> None:
        """
        Args:
            client: Bark client, None when notifications are disabled
            staff_url_base: Staff console URL opened from the notification
            preview_length: Max characters of text shown in the body
        """
        self.client = client
        self.staff_url_base = staff_url_base
        self.preview_length = preview_length

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def build_preview(self, content: str, content_type: ContentType | str) -> str:
        """Notification body: clipped text, or a label for attachments."""
        content_type = ContentType(content_type)
        if content_type != ContentType.TEXT:
            return _MEDIA_LABELS[content_type]
        if len(content) > self.preview_length:
            return content[: self.preview_length] + "..."
        return content

    def build_click_url(self, session_id: str) -> str:
        return f"{self.staff_url_base}?{urlencode({'s': session_id})}"

    async def notify_visitor_message(
        self,
        session_id: str,
        visitor_name: str,
        content: str,
        content_type: ContentType | str,
    ) -> bool:
        """
        Push an alert for a new visitor message.

        Args:
            session_id: Session the message belongs to
            visitor_name: Shown in the title
            content: Message body or file URL
            content_type: Message content type

        Returns:
            bool: True if the push was accepted
        """
        if self.client is None:
            logger.debug("Bark not configured, skipping notification", extra={"session_id": session_id})
            return False

        title = f"💬 {visitor_name}"
        body = self.build_preview(content, content_type)
        try:
            await self.client.push(title, body, url=self.build_click_url(str(session_id)))
        except NotificationError as e:
            log_with_context(
                logger,
                logging.WARNING,
                "Bark notification failed",
                session_id=session_id,
                error=e,
                preview=body,
            )
            return False
        except Exception as e:
            log_exception_with_context(
                logger, "Unexpected error sending Bark notification", e, session_id=session_id
            )
            return False

        logger.info("Bark notification sent", extra={"session_id": session_id})
        return True
