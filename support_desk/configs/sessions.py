"""
Session lifecycle configuration.

Dependencies: pydantic, pydantic_settings
System role: Inactive session sweeping
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from support_desk.configs.base import BaseSettings


class SessionSettings(BaseSettings):
    """Chat session lifecycle configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SESSION_",
        case_sensitive=False,
        extra="ignore",
    )

    inactive_days: int = Field(
        default=0,
        ge=0,
        description="Close active sessions idle for this many days (0 disables)",
    )
    sweep_interval_seconds: float = Field(
        default=3600.0,
        description="How often the inactive session sweep runs",
    )
