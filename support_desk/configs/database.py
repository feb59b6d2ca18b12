"""
Database configuration settings.

SQLAlchemy async connection URL and pool sizing. SQLite (aiosqlite) is
the default store; PostgreSQL via asyncpg is used when DATABASE_URL
points at it.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for ORM
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from support_desk.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """Chat database configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DATABASE_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str = Field(
        default="sqlite+aiosqlite:///./data/support_desk.db",
        description="SQLAlchemy async database URL",
    )

    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=20, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Connection pool timeout in seconds")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured URL targets SQLite."""
        return self.url.startswith("sqlite")

    @property
    def async_database_url(self) -> str:
        """
        Async SQLAlchemy URL.

        Plain `sqlite://` and `postgresql://` URLs are upgraded to their
        async drivers so the same value can be shared with other tools.

        Returns:
            str: SQLAlchemy async-compatible database URL
        """
        if self.url.startswith("sqlite://"):
            return self.url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        if self.url.startswith("postgresql://"):
            return self.url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return self.url
