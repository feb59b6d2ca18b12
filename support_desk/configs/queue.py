"""
Queue estimator configuration.

Dependencies: pydantic, pydantic_settings
System role: Wait-time estimation constants
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from support_desk.configs.base import BaseSettings


class QueueSettings(BaseSettings):
    """Waiting queue configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="QUEUE_",
        case_sensitive=False,
        extra="ignore",
    )

    avg_handle_minutes: int = Field(
        default=5,
        ge=0,
        description="Average minutes staff spend per waiting session",
    )
