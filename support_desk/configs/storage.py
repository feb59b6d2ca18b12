"""
Uploaded file storage configuration.

Selects the backend for chat attachments (local directory or an
S3-compatible bucket) and the per-category size caps.

Dependencies: pydantic, pydantic_settings
System role: File storage configuration for uploads
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from support_desk.configs.base import BaseSettings


class StorageSettings(BaseSettings):
    """Attachment storage configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STORAGE_",
        case_sensitive=False,
        extra="ignore",
    )

    backend: str = Field(default="local", description="Storage backend: local or s3")
    upload_dir: str = Field(default="./data/uploads", description="Directory for local storage")
    url_prefix: str = Field(default="/uploads", description="Public URL prefix for stored files")

    bucket: str = Field(default="support-desk-uploads", description="S3 bucket name")
    region: str = Field(default="auto", description="S3 region (R2 uses 'auto')")
    prefix: str = Field(default="uploads/", description="Key prefix inside the bucket")
    endpoint_url: str | None = Field(
        default=None,
        description="Custom endpoint for S3-compatible stores (Cloudflare R2, MinIO)",
    )

    max_image_bytes: int = Field(default=5 * 1024 * 1024, description="Image size cap")
    max_video_bytes: int = Field(default=20 * 1024 * 1024, description="Video size cap")
    max_file_bytes: int = Field(default=50 * 1024 * 1024, description="Document size cap")
