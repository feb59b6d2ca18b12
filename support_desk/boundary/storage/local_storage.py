"""
Local filesystem storage.

Dependencies: asyncio, pathlib (stdlib)
System role: Default attachment storage for single-host deployments
"""

import asyncio
import logging
from pathlib import Path

from support_desk.boundary.storage.base import FileStorage, StoredFile, validate_key
from support_desk.core.exceptions import StorageError, StoredFileNotFoundError

logger = logging.getLogger(__name__)


class LocalFileStorage(FileStorage):
    """Stores attachments as files in one directory."""

    def __init__(self, upload_dir: str | Path) -> None:
        """
        Args:
            upload_dir: Directory for stored files (created if missing)
        """
        self._root = Path(upload_dir).expanduser().resolve()
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        return self._root / validate_key(key)

    async def put(self, key: str, data: bytes, content_type: str | None = None) -> None:
        path = self._path(key)
        try:
            await asyncio.to_thread(path.write_bytes, data)
        except OSError as e:
            raise StorageError("Failed to write file", key=key, operation="put") from e
        logger.debug("Stored file locally", extra={"key": key, "size": len(data)})

    async def get(self, key: str) -> StoredFile:
        path = self._path(key)
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as e:
            raise StoredFileNotFoundError(key) from e
        except OSError as e:
            raise StorageError("Failed to read file", key=key, operation="get") from e
        return StoredFile(key=key, data=data)

    async def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError("Failed to delete file", key=key, operation="delete") from e
        return True

    async def exists(self, key: str) -> bool:
        return await asyncio.to_thread(self._path(key).is_file)
