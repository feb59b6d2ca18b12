"""
Upload service.

Classifies incoming files into message content types, enforces the
per-type size caps, and stores accepted files under generated keys.

Dependencies: support_desk.boundary.storage, support_desk.configs
System role: Attachment intake and retrieval
"""

import logging
import mimetypes
import uuid
from pathlib import PurePath

from support_desk.boundary.db.models.message_model import ContentType
from support_desk.boundary.storage.base import FileStorage, StoredFile, validate_key
from support_desk.configs.storage import StorageSettings
from support_desk.core.exceptions import StorageError, StoredFileNotFoundError, UploadRejectedError
from support_desk.models.upload import UploadResult
from support_desk.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
VIDEO_MIME_TYPES = frozenset({"video/mp4", "video/webm"})
FILE_MIME_TYPES = frozenset({
    "text/plain",
    "text/csv",
    "application/csv",
    "application/zip",
    "application/x-zip-compressed",
    "application/octet-stream",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
})
# Browsers report unknown binaries as octet-stream; accept those by extension only.
OCTET_STREAM_EXTENSIONS = frozenset({
    ".txt", ".csv", ".zip", ".ipa", ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".apk", ".dmg",
})

# MIME types served for stored files, by extension.
SERVE_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".txt": "text/plain",
    ".csv": "text/csv",
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".apk": "application/vnd.android.package-archive",
    ".ipa": "application/octet-stream",
    ".dmg": "application/x-apple-diskimage",
}

DEFAULT_EXTENSION = ".bin"


def file_extension(filename: str | None) -> str:
    """Lower-cased extension including the dot, or '' when there is none."""
    if not filename:
        return ""
    return PurePath(filename).suffix.lower()


class UploadService:
    """Attachment validation and storage."""

    def __init__(self, storage: FileStorage, settings: StorageSettings | None = None) -> None:
        """
        Args:
            storage: Backend that holds file bytes
            settings: Size caps and public URL prefix
        """
        self.storage = storage
        self.settings = settings or StorageSettings()

    def detect_content_type(self, mime_type: str | None, filename: str | None) -> ContentType | None:
        """
        Map a MIME type (and file name) to a message content type.

        Args:
            mime_type: MIME type reported by the client
            filename: Original file name

        Returns:
            ContentType | None: IMAGE, VIDEO or FILE, None if not allowed
        """
        mime_type = (mime_type or "").split(";")[0].strip().lower()
        if mime_type in IMAGE_MIME_TYPES:
            return ContentType.IMAGE
        if mime_type in VIDEO_MIME_TYPES:
            return ContentType.VIDEO
        if mime_type == "application/octet-stream" or not mime_type:
            if file_extension(filename) in OCTET_STREAM_EXTENSIONS:
                return ContentType.FILE
            return None
        if mime_type in FILE_MIME_TYPES:
            return ContentType.FILE
        return None

    def max_size_for(self, content_type: ContentType) -> int:
        if content_type == ContentType.IMAGE:
            return self.settings.max_image_bytes
        if content_type == ContentType.VIDEO:
            return self.settings.max_video_bytes
        return self.settings.max_file_bytes

    def validate_file(self, mime_type: str | None, size: int, filename: str | None) -> ContentType:
        """
        Check type and size of an incoming file.

        Args:
            mime_type: MIME type reported by the client
            size: Size in bytes
            filename: Original file name

        Returns:
            ContentType: Detected content type

        Raises:
            UploadRejectedError: If the type is not allowed or the file is too large
        """
        content_type = self.detect_content_type(mime_type, filename)
        if content_type is None:
            raise UploadRejectedError(f"Unsupported file type: {mime_type or 'unknown'}", mime_type=mime_type)

        max_size = self.max_size_for(content_type)
        if size > max_size:
            raise UploadRejectedError(
                f"File too large. Maximum size for {content_type.value} is "
                f"{max_size // (1024 * 1024)}MB",
                mime_type=mime_type,
                details={"size": size, "max_size": max_size},
            )
        if size <= 0:
            raise UploadRejectedError("File is empty", mime_type=mime_type)
        return content_type

    async def save_file(self, data: bytes, filename: str | None, mime_type: str | None) -> UploadResult:
        """
        Validate and store an uploaded file under a generated key.

        Args:
            data: File bytes
            filename: Original client file name
            mime_type: MIME type reported by the client

        Returns:
            UploadResult: Public URL and metadata

        Raises:
            UploadRejectedError: If validation fails
            StorageError: If the backend write fails
        """
        content_type = self.validate_file(mime_type, len(data), filename)
        key = f"{uuid.uuid4()}{file_extension(filename) or DEFAULT_EXTENSION}"
        await self.storage.put(key, data, content_type=mime_type)

        result = UploadResult(
            url=f"{self.settings.url_prefix.rstrip('/')}/{key}",
            key=key,
            file_name=filename or key,
            file_size=len(data),
            content_type=content_type,
            mime_type=mime_type or "application/octet-stream",
        )
        logger.info(
            "File uploaded",
            extra={"key": key, "size": result.file_size, "content_type": content_type.value},
        )
        return result

    async def read_file(self, key: str) -> tuple[StoredFile, str]:
        """
        Load a stored file and the MIME type to serve it with.

        Args:
            key: Storage key (the file name part of the public URL)

        Returns:
            tuple: (stored file, MIME type)

        Raises:
            StoredFileNotFoundError: If the key is invalid or the file does not exist
        """
        try:
            validate_key(key)
        except StorageError as e:
            raise StoredFileNotFoundError(key) from e
        stored = await self.storage.get(key)
        mime_type = (
            SERVE_MIME_TYPES.get(file_extension(key))
            or stored.content_type
            or mimetypes.guess_type(key)[0]
            or "application/octet-stream"
        )
        return stored, mime_type

    async def discard_file(self, key: str) -> bool:
        """
        Remove a stored upload whose message could not be saved.

        Storage failures are logged, not raised, so the original error
        reaches the caller.

        Returns:
            bool: True if the file was removed
        """
        try:
            removed = await self.storage.delete(key)
        except StorageError as e:
            log_exception_with_context(logger, "Failed to discard orphaned upload", e, key=key)
            return False
        logger.info("Orphaned upload discarded", extra={"key": key, "removed": removed})
        return removed
