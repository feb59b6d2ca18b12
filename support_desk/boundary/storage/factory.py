"""
Storage backend selection.

Dependencies: support_desk.configs
System role: Builds the configured FileStorage
"""

import logging

from support_desk.boundary.storage.base import FileStorage
from support_desk.boundary.storage.local_storage import LocalFileStorage
from support_desk.boundary.storage.s3_storage import S3FileStorage
from support_desk.configs.storage import StorageSettings

logger = logging.getLogger(__name__)


def create_file_storage(settings: StorageSettings) -> FileStorage:
    """
    Build the storage backend named by `settings.backend`.

    Args:
        settings: Storage configuration

    Returns:
        FileStorage: Local or S3 backend

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = settings.backend.lower()
    if backend == "local":
        logger.info("Using local file storage", extra={"upload_dir": settings.upload_dir})
        return LocalFileStorage(settings.upload_dir)
    if backend in ("s3", "r2"):
        logger.info(
            "Using S3 file storage",
            extra={"bucket": settings.bucket, "endpoint_url": settings.endpoint_url},
        )
        return S3FileStorage(
            bucket=settings.bucket,
            region=settings.region,
            prefix=settings.prefix,
            endpoint_url=settings.endpoint_url,
        )
    raise ValueError(f"Unknown storage backend: {settings.backend}")
