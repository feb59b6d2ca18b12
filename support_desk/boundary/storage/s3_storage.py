"""
S3-compatible object storage.

Works with AWS S3 and with Cloudflare R2 or MinIO through a custom
endpoint URL. boto3 is synchronous, so calls run in a worker thread.

Dependencies: boto3
System role: Attachment storage for multi-host or serverless deployments
"""

import asyncio
import logging

import boto3
from botocore.exceptions import ClientError

from support_desk.boundary.storage.base import FileStorage, StoredFile, validate_key
from support_desk.core.exceptions import StorageError, StoredFileNotFoundError

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class S3FileStorage(FileStorage):
    """Stores attachments as objects under a key prefix in one bucket."""

    def __init__(
        self,
        bucket: str,
        region: str = "auto",
        prefix: str = "uploads/",
        endpoint_url: str | None = None,
        client=None,
    ) -> None:
        """
        Initialize S3 storage.

        Args:
            bucket: Bucket name
            region: Region name ("auto" for R2)
            prefix: Key prefix for all objects
            endpoint_url: Custom endpoint for S3-compatible stores
            client: Preconfigured boto3 S3 client (mainly for tests)
        """
        self._bucket = bucket
        self._prefix = prefix
        self._s3_client = client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
        )

    def _object_key(self, key: str) -> str:
        return f"{self._prefix}{validate_key(key)}"

    async def put(self, key: str, data: bytes, content_type: str | None = None) -> None:
        params = {"Bucket": self._bucket, "Key": self._object_key(key), "Body": data}
        if content_type:
            params["ContentType"] = content_type
        try:
            await asyncio.to_thread(self._s3_client.put_object, **params)
        except ClientError as e:
            raise StorageError("Failed to upload object", key=key, operation="put") from e
        logger.debug("Stored object", extra={"bucket": self._bucket, "key": key, "size": len(data)})

    async def get(self, key: str) -> StoredFile:
        try:
            response = await asyncio.to_thread(
                self._s3_client.get_object,
                Bucket=self._bucket,
                Key=self._object_key(key),
            )
            body = response["Body"]
            data = await asyncio.to_thread(body.read)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                raise StoredFileNotFoundError(key) from e
            raise StorageError("Failed to read object", key=key, operation="get") from e
        return StoredFile(key=key, data=data, content_type=response.get("ContentType"))

    async def delete(self, key: str) -> bool:
        if not await self.exists(key):
            return False
        try:
            await asyncio.to_thread(
                self._s3_client.delete_object,
                Bucket=self._bucket,
                Key=self._object_key(key),
            )
        except ClientError as e:
            raise StorageError("Failed to delete object", key=key, operation="delete") from e
        return True

    async def exists(self, key: str) -> bool:
        try:
            await asyncio.to_thread(
                self._s3_client.head_object,
                Bucket=self._bucket,
                Key=self._object_key(key),
            )
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                return False
            raise StorageError("Failed to stat object", key=key, operation="exists") from e
