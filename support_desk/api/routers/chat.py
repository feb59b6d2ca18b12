"""
Visitor chat API endpoints.

Routes:
- POST /api/chat/session - Create or resume a session
- GET /api/chat/messages - Page through history (cursor: before)
- POST /api/chat/messages - Send a visitor message
- POST /api/chat/upload - Upload an attachment and send it as a message
- GET /api/chat/sse/{session_id} - Live updates for one session
- PUT /api/chat/read/{session_id} - Mark staff messages read
- GET /api/chat/queue/{session_id} - Queue position and wait estimate

Dependencies: support_desk.application.services, support_desk.core.realtime
System role: Visitor-facing HTTP API
"""

import logging
from uuid import UUID

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    Request,
    UploadFile,
)

from support_desk.api.deps import (
    get_chat_service,
    get_event_hub,
    get_notification_service,
    get_queue_service,
    get_settings_dependency,
    get_upload_service,
)
from support_desk.api.routers.router_utils import (
    handle_api_errors,
    message_payload,
    session_payload,
    sse_response,
    stream_events,
)
from support_desk.application.services import (
    ChatService,
    NotificationService,
    QueueService,
    UploadService,
)
from support_desk.boundary.db.models.message_model import SenderType
from support_desk.configs import Settings
from support_desk.core.realtime import EventHub
from support_desk.models.common import AckResponse, SuccessResponse
from support_desk.models.message import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MessagePageResponse,
    MessageResponse,
    SendMessageRequest,
)
from support_desk.models.queue import QueueInfoResponse
from support_desk.models.session import CreateSessionRequest, SessionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])


def parse_session_id(raw: str | None) -> UUID:
    """
    Parse a session ID query/form value.

    Raises:
        HTTPException(400): Missing or not a UUID
    """
    if not raw:
        raise HTTPException(status_code=400, detail="Session ID is required")
    try:
        return UUID(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid session ID")


@router.post("/session", response_model=SuccessResponse[SessionResponse])
@handle_api_errors("Failed to create session")
async def create_session(
    request: CreateSessionRequest | None = None,
    chat_service: ChatService = Depends(get_chat_service),
) -> SuccessResponse[SessionResponse]:
    """
    Create a session, or return the existing one for `sessionId`.

    Args:
        request: Optional visitor name and session ID
        chat_service: Injected ChatService

    Returns:
        SuccessResponse[SessionResponse]: Session state
    """
    request = request or CreateSessionRequest()
    chat_session = await chat_service.create_or_get_session(
        visitor_name=request.visitor_name,
        session_id=request.session_id,
    )
    return SuccessResponse(data=SessionResponse.model_validate(chat_session))


@router.get("/messages", response_model=MessagePageResponse)
@handle_api_errors("Failed to get messages")
async def get_messages(
    session_id: str | None = Query(default=None, alias="sessionId"),
    before: int | None = Query(default=None, ge=0),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    chat_service: ChatService = Depends(get_chat_service),
) -> MessagePageResponse:
    """
    Page backwards through a session's history.

    Args:
        session_id: Session UUID (required)
        before: Return only messages with a smaller ID (0 means latest page)
        limit: Page size (1-100)
        chat_service: Injected ChatService

    Returns:
        MessagePageResponse: Messages oldest first plus hasMore

    Raises:
        HTTPException(400): Missing or malformed sessionId
    """
    messages, has_more = await chat_service.get_messages(
        parse_session_id(session_id), before=before or None, limit=limit
    )
    return MessagePageResponse(
        data=[MessageResponse.model_validate(m) for m in messages],
        has_more=has_more,
    )


@router.post("/messages", response_model=SuccessResponse[MessageResponse])
@handle_api_errors("Failed to send message")
async def send_message(
    request: SendMessageRequest,
    background_tasks: BackgroundTasks,
    chat_service: ChatService = Depends(get_chat_service),
    event_hub: EventHub = Depends(get_event_hub),
    notification_service: NotificationService = Depends(get_notification_service),
) -> SuccessResponse[MessageResponse]:
    """
    Store a visitor message, fan it out, and alert staff.

    Broadcasts and the push notification run after the response is sent.

    Raises:
        HTTPException(400): Invalid body
        HTTPException(404): Unknown session
    """
    message, chat_session = await chat_service.send_message(
        session_id=request.session_id,
        sender_type=SenderType.VISITOR,
        content_type=request.content_type,
        content=request.content,
        thumbnail_url=request.thumbnail_url,
        file_name=request.file_name,
        file_size=request.file_size,
    )

    background_tasks.add_task(event_hub.broadcast_message, message_payload(message))
    background_tasks.add_task(event_hub.broadcast_session_update, session_payload(chat_session))
    background_tasks.add_task(
        notification_service.notify_visitor_message,
        str(chat_session.id),
        chat_session.visitor_name,
        message.content,
        message.content_type,
    )
    return SuccessResponse(data=MessageResponse.model_validate(message))


@router.post("/upload", response_model=SuccessResponse[MessageResponse])
@handle_api_errors("Failed to upload file")
async def upload_file(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    session_id: str | None = Form(default=None, alias="sessionId"),
    chat_service: ChatService = Depends(get_chat_service),
    upload_service: UploadService = Depends(get_upload_service),
    event_hub: EventHub = Depends(get_event_hub),
    notification_service: NotificationService = Depends(get_notification_service),
) -> SuccessResponse[MessageResponse]:
    """
    Store an attachment and post it to the session as a visitor message.

    Raises:
        HTTPException(400): Missing fields, unsupported type, or too large
        HTTPException(404): Unknown session
    """
    session_uuid = parse_session_id(session_id)
    await chat_service.get_session(session_uuid)

    data = await file.read()
    upload = await upload_service.save_file(data, file.filename, file.content_type)

    try:
        message, chat_session = await chat_service.send_message(
            session_id=session_uuid,
            sender_type=SenderType.VISITOR,
            content_type=upload.content_type,
            content=upload.url,
            thumbnail_url=upload.thumbnail_url,
            file_name=upload.file_name,
            file_size=upload.file_size,
        )
    except Exception:
        await upload_service.discard_file(upload.key)
        raise

    background_tasks.add_task(event_hub.broadcast_message, message_payload(message))
    background_tasks.add_task(event_hub.broadcast_session_update, session_payload(chat_session))
    background_tasks.add_task(
        notification_service.notify_visitor_message,
        str(chat_session.id),
        chat_session.visitor_name,
        upload.url,
        upload.content_type,
    )
    return SuccessResponse(data=MessageResponse.model_validate(message))


@router.get("/sse/{session_id}")
async def session_events(
    session_id: UUID,
    request: Request,
    event_hub: EventHub = Depends(get_event_hub),
    settings: Settings = Depends(get_settings_dependency),
):
    """
    Open the live update stream for one session.

    Emits `connected` immediately, then `message`, `session_update` and
    `heartbeat` events.
    """
    key = str(session_id)
    connection = event_hub.add_session_client(key)
    return sse_response(
        stream_events(
            request,
            connection,
            on_close=lambda: event_hub.remove_session_client(key, connection),
            poll_interval=settings.realtime.poll_interval_seconds,
        )
    )


@router.put("/read/{session_id}", response_model=AckResponse)
@handle_api_errors("Failed to mark as read")
async def mark_read(
    session_id: UUID,
    background_tasks: BackgroundTasks,
    chat_service: ChatService = Depends(get_chat_service),
    event_hub: EventHub = Depends(get_event_hub),
) -> AckResponse:
    """Mark staff messages read by the visitor. Succeeds for unknown sessions."""
    chat_session = await chat_service.mark_as_read(session_id, SenderType.VISITOR)
    if chat_session is not None:
        background_tasks.add_task(event_hub.broadcast_session_update, session_payload(chat_session))
    return AckResponse()


@router.get("/queue/{session_id}", response_model=SuccessResponse[QueueInfoResponse])
@handle_api_errors("Failed to get queue info")
async def get_queue_info(
    session_id: UUID,
    queue_service: QueueService = Depends(get_queue_service),
) -> SuccessResponse[QueueInfoResponse]:
    """Queue position, estimated wait and queue length for a session."""
    info = await queue_service.get_queue_info(session_id)
    return SuccessResponse(data=QueueInfoResponse(**info))
