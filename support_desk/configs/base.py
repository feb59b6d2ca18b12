"""
Base configuration settings.

Shared fields every settings section inherits: runtime environment,
debug flag, log level, and where the HTTP server binds.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict
from pydantic import Field


class BaseSettings(PydanticBaseSettings):
    """Common settings read from the process environment and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Application environment (development, staging, production)",
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    host: str = Field(default="0.0.0.0", description="HTTP bind address")
    port: int = Field(default=3001, description="HTTP listen port")

