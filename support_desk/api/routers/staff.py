"""
Staff console API endpoints.

Routes:
- GET /api/staff/sessions - List sessions with last message preview
- GET /api/staff/sessions/{session_id} - One session with last message
- GET /api/staff/unread - Total unread visitor messages
- GET /api/staff/messages - Page through a session's history
- POST /api/staff/messages - Send a staff reply
- POST /api/staff/upload - Upload an attachment as a staff message
- GET /api/staff/sse - Live updates for every session
- PUT /api/staff/read/{session_id} - Mark visitor messages read
- PUT /api/staff/sessions/{session_id}/topic - Set session topic
- PUT /api/staff/sessions/{session_id}/status - Move task status
- GET /api/staff/queue - Queue overview

Staff authentication is handled outside this service.

Dependencies: support_desk.application.services, support_desk.core.realtime
System role: Staff-facing HTTP API
"""

import logging
from uuid import UUID

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    Form,
    Query,
    Request,
    UploadFile,
)

from support_desk.api.deps import (
    get_chat_service,
    get_event_hub,
    get_queue_service,
    get_settings_dependency,
    get_staff_service,
    get_upload_service,
)
from support_desk.api.routers.chat import parse_session_id
from support_desk.api.routers.router_utils import (
    handle_api_errors,
    message_payload,
    session_payload,
    sse_response,
    stream_events,
)
from support_desk.application.services import (
    ChatService,
    QueueService,
    StaffService,
    UploadService,
)
from support_desk.boundary.db.models.message_model import MessageModel, SenderType
from support_desk.boundary.db.models.session_model import SessionStatus
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
from support_desk.models.queue import QueueItemResponse
from support_desk.models.session import (
    LastMessagePreview,
    SessionDetailResponse,
    SessionListItem,
    SessionResponse,
    UnreadCountResponse,
    UpdateTaskStatusRequest,
    UpdateTopicRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/staff", tags=["staff"])


def _preview(message: MessageModel | None) -> LastMessagePreview | None:
    return LastMessagePreview.model_validate(message) if message is not None else None


@router.get("/sessions", response_model=SuccessResponse[list[SessionListItem]])
@handle_api_errors("Failed to get sessions")
async def list_sessions(
    status: SessionStatus | None = Query(default=None),
    staff_service: StaffService = Depends(get_staff_service),
) -> SuccessResponse[list[SessionListItem]]:
    """
    List sessions by recent activity, optionally filtered by status.

    Args:
        status: active or closed
        staff_service: Injected StaffService

    Returns:
        SuccessResponse[list[SessionListItem]]: Sessions with last message preview
    """
    rows = await staff_service.list_sessions_with_preview(status)
    items = [
        SessionListItem(
            **SessionResponse.model_validate(chat_session).model_dump(),
            last_message=_preview(last_message),
        )
        for chat_session, last_message in rows
    ]
    return SuccessResponse(data=items)


@router.get("/sessions/{session_id}", response_model=SuccessResponse[SessionDetailResponse])
@handle_api_errors("Failed to get session")
async def get_session(
    session_id: UUID,
    staff_service: StaffService = Depends(get_staff_service),
) -> SuccessResponse[SessionDetailResponse]:
    """
    Raises:
        HTTPException(404): Session not found
    """
    chat_session, last_message = await staff_service.get_session_with_preview(session_id)
    return SuccessResponse(
        data=SessionDetailResponse(
            session=SessionResponse.model_validate(chat_session),
            last_message=_preview(last_message),
        )
    )


@router.get("/unread", response_model=SuccessResponse[UnreadCountResponse])
@handle_api_errors("Failed to get unread count")
async def get_unread_count(
    staff_service: StaffService = Depends(get_staff_service),
) -> SuccessResponse[UnreadCountResponse]:
    """Unread visitor messages across active sessions."""
    count = await staff_service.get_total_unread_count()
    return SuccessResponse(data=UnreadCountResponse(count=count))


@router.get("/messages", response_model=MessagePageResponse)
@handle_api_errors("Failed to get messages")
async def get_messages(
    session_id: str | None = Query(default=None, alias="sessionId"),
    before: int | None = Query(default=None, ge=0),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    chat_service: ChatService = Depends(get_chat_service),
) -> MessagePageResponse:
    """Page backwards through a session's history (same contract as the visitor route)."""
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
) -> SuccessResponse[MessageResponse]:
    """
    Store a staff reply and fan it out.

    Raises:
        HTTPException(400): Invalid body
        HTTPException(404): Unknown session
    """
    message, chat_session = await chat_service.send_message(
        session_id=request.session_id,
        sender_type=SenderType.STAFF,
        content_type=request.content_type,
        content=request.content,
        thumbnail_url=request.thumbnail_url,
        file_name=request.file_name,
        file_size=request.file_size,
    )
    background_tasks.add_task(event_hub.broadcast_message, message_payload(message))
    background_tasks.add_task(event_hub.broadcast_session_update, session_payload(chat_session))
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
) -> SuccessResponse[MessageResponse]:
    """Store an attachment and post it as a staff message."""
    session_uuid = parse_session_id(session_id)
    await chat_service.get_session(session_uuid)

    data = await file.read()
    upload = await upload_service.save_file(data, file.filename, file.content_type)

    try:
        message, chat_session = await chat_service.send_message(
            session_id=session_uuid,
            sender_type=SenderType.STAFF,
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
    return SuccessResponse(data=MessageResponse.model_validate(message))


@router.get("/sse")
async def staff_events(
    request: Request,
    event_hub: EventHub = Depends(get_event_hub),
    settings: Settings = Depends(get_settings_dependency),
):
    """Open the staff live update stream (all sessions)."""
    connection = event_hub.add_staff_client()
    return sse_response(
        stream_events(
            request,
            connection,
            on_close=lambda: event_hub.remove_staff_client(connection),
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
    """Mark visitor messages read by staff and push the cleared counter."""
    chat_session = await chat_service.mark_as_read(session_id, SenderType.STAFF)
    if chat_session is not None:
        background_tasks.add_task(event_hub.broadcast_session_update, session_payload(chat_session))
    return AckResponse()


@router.put("/sessions/{session_id}/topic", response_model=SuccessResponse[SessionResponse])
@handle_api_errors("Failed to update topic")
async def update_topic(
    session_id: UUID,
    request: UpdateTopicRequest,
    background_tasks: BackgroundTasks,
    staff_service: StaffService = Depends(get_staff_service),
    event_hub: EventHub = Depends(get_event_hub),
) -> SuccessResponse[SessionResponse]:
    """
    Raises:
        HTTPException(400): topic is not a string
        HTTPException(404): Session not found
    """
    chat_session = await staff_service.update_session_topic(session_id, request.topic)
    background_tasks.add_task(event_hub.broadcast_session_update, session_payload(chat_session))
    return SuccessResponse(data=SessionResponse.model_validate(chat_session))


@router.put("/sessions/{session_id}/status", response_model=SuccessResponse[SessionResponse])
@handle_api_errors("Failed to update task status")
async def update_task_status(
    session_id: UUID,
    request: UpdateTaskStatusRequest,
    background_tasks: BackgroundTasks,
    staff_service: StaffService = Depends(get_staff_service),
    event_hub: EventHub = Depends(get_event_hub),
) -> SuccessResponse[SessionResponse]:
    """
    Move a session through the workflow; queue positions are recalculated.

    Raises:
        HTTPException(400): Unknown task status
        HTTPException(404): Session not found
    """
    chat_session = await staff_service.update_task_status(session_id, request.task_status)
    background_tasks.add_task(event_hub.broadcast_session_update, session_payload(chat_session))
    return SuccessResponse(data=SessionResponse.model_validate(chat_session))


@router.get("/queue", response_model=SuccessResponse[list[QueueItemResponse]])
@handle_api_errors("Failed to get queue")
async def get_queue(
    queue_service: QueueService = Depends(get_queue_service),
) -> SuccessResponse[list[QueueItemResponse]]:
    """In-progress sessions first, then the waiting queue in FIFO order."""
    items = await queue_service.get_queue_list()
    return SuccessResponse(data=[QueueItemResponse(**item) for item in items])
