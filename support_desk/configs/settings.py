"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from support_desk.configs.base import BaseSettings
from support_desk.configs.cors import CORSSettings
from support_desk.configs.database import DatabaseSettings
from support_desk.configs.notifications import NotificationSettings
from support_desk.configs.queue import QueueSettings
from support_desk.configs.realtime import RealtimeSettings
from support_desk.configs.sessions import SessionSettings
from support_desk.configs.storage import StorageSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    realtime: RealtimeSettings = Field(default_factory=RealtimeSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)
    sessions: SessionSettings = Field(default_factory=SessionSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from support_desk.configs import get_settings
        settings = get_settings()
    """
    return Settings()
