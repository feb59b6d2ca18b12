"""
Abstract storage interface for uploaded chat attachments.

Keys are flat generated file names (`<uuid><ext>`); backends reject
anything that could escape their root.

Dependencies: abc (stdlib)
System role: Storage port used by UploadService
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from support_desk.core.exceptions import StorageError


@dataclass(frozen=True)
class StoredFile:
    """File content read back from storage."""

    key: str
    data: bytes
    content_type: str | None = None


def validate_key(key: str) -> str:
    """
    Reject keys that are not a single path segment.

    Args:
        key: Storage key

    Returns:
        str: The key unchanged

    Raises:
        StorageError: If the key is empty or contains path separators
    """
    if not key or key in (".", "..") or "/" in key or "\\" in key or "\x00" in key:
        raise StorageError("Invalid storage key", key=key)
    return key


class FileStorage(ABC):
    """Async key/value store for attachment bytes."""

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str | None = None) -> None:
        """Store `data` under `key`, overwriting any existing object."""

    @abstractmethod
    async def get(self, key: str) -> StoredFile:
        """
        Read a stored object.

        Raises:
            StoredFileNotFoundError: If nothing is stored under `key`
        """

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove an object; returns False if it did not exist."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Whether an object is stored under `key`."""
