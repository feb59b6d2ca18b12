"""
CORS configuration.

Dependencies: pydantic, pydantic_settings
System role: Cross-origin policy for the browser widget and staff console
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from support_desk.configs.base import BaseSettings


class CORSSettings(BaseSettings):
    """Allowed origins for browser clients."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CORS_",
        case_sensitive=False,
        extra="ignore",
    )

    allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API (JSON list in env)",
    )
