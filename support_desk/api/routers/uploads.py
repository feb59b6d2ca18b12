"""
Stored attachment download endpoint.

Routes: GET /uploads/{filename}

Dependencies: support_desk.application.services.upload_service
System role: Serves uploaded files referenced by message URLs
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from support_desk.api.deps import get_upload_service
from support_desk.api.routers.router_utils import handle_api_errors
from support_desk.application.services import UploadService

router = APIRouter(prefix="/uploads", tags=["uploads"])

# Keys are random and content is immutable once written.
CACHE_CONTROL = "public, max-age=31536000"


@router.get("/{filename}")
@handle_api_errors("Failed to read file")
async def get_upload(
    filename: str,
    upload_service: UploadService = Depends(get_upload_service),
) -> Response:
    """
    Serve a stored file with its MIME type and long-lived caching.

    Raises:
        HTTPException(404): File not found
        HTTPException(400): Invalid file name
    """
    stored, mime_type = await upload_service.read_file(filename)
    return Response(
        content=stored.data,
        media_type=mime_type,
        headers={"Cache-Control": CACHE_CONTROL},
    )
