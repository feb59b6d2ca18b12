"""
Real-time fan-out configuration.

Dependencies: pydantic, pydantic_settings
System role: SSE connection registry tuning
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from support_desk.configs.base import BaseSettings


class RealtimeSettings(BaseSettings):
    """SSE connection configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REALTIME_",
        case_sensitive=False,
        extra="ignore",
    )

    write_timeout_seconds: float = Field(
        default=5.0,
        description="Max time a single event write may block before the connection is marked dead",
    )
    heartbeat_interval_seconds: float = Field(default=30.0, description="Heartbeat period")
    queue_size: int = Field(default=100, description="Buffered events per connection")
    poll_interval_seconds: float = Field(
        default=1.0,
        description="How often a stream checks for client disconnect while idle",
    )
