"""
Attachment storage backends.

Exports:
  - FileStorage: Abstract async storage interface
  - LocalFileStorage: Files on local disk
  - S3FileStorage: S3-compatible bucket (AWS S3, Cloudflare R2, MinIO)
  - create_file_storage(): Backend selected from StorageSettings
"""

from support_desk.boundary.storage.base import FileStorage, StoredFile
from support_desk.boundary.storage.factory import create_file_storage
from support_desk.boundary.storage.local_storage import LocalFileStorage
from support_desk.boundary.storage.s3_storage import S3FileStorage

__all__ = [
    "FileStorage",
    "StoredFile",
    "LocalFileStorage",
    "S3FileStorage",
    "create_file_storage",
]
