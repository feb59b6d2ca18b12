"""
Upload schemas.

Dependencies: pydantic
System role: Stored attachment metadata
"""

from support_desk.boundary.db.models.message_model import ContentType
from support_desk.models.common import ApiModel


class UploadResult(ApiModel):
    """
    Where an accepted upload was stored.

    Attributes:
        url: Public URL (`/uploads/<key>`)
        key: Storage key
        file_name: Original client file name
        file_size: Size in bytes
        content_type: Detected message content type
        mime_type: MIME type reported by the client
        thumbnail_url: Preview image URL (not generated yet)
    """

    url: str
    key: str
    file_name: str
    file_size: int
    content_type: ContentType
    mime_type: str
    thumbnail_url: str | None = None
