"""
Push notification configuration.

Bark (iOS push relay) credentials and the staff console link embedded
in notifications. Without a key, notifications are skipped.

Dependencies: pydantic, pydantic_settings
System role: Push notification configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from support_desk.configs.base import BaseSettings


class NotificationSettings(BaseSettings):
    """Bark push notification configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BARK_",
        case_sensitive=False,
        extra="ignore",
    )

    key: str | None = Field(default=None, description="Bark device key")
    api_url: str = Field(default="https://api.day.app", description="Bark server URL")
    staff_url_base: str = Field(
        default="http://localhost:3010/staff",
        description="Staff console URL opened when the notification is tapped",
    )
    sound: str = Field(default="minuet", description="Notification sound")
    group: str = Field(default="chat-message", description="Notification group")
    timeout_seconds: float = Field(default=10.0, description="HTTP timeout for Bark calls")
    max_attempts: int = Field(default=3, description="Tries per push on transport errors")
    preview_length: int = Field(default=50, description="Max characters of text preview")

    @property
    def enabled(self) -> bool:
        """Whether push notifications are configured."""
        return bool(self.key)
