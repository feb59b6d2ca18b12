"""
Server-Sent Events helpers.

Drains an SSEConnection into an HTTP stream and unregisters it when the
client disconnects or the hub marks it dead.
"""

import logging
from typing import AsyncIterator, Callable

from fastapi import Request
from fastapi.responses import StreamingResponse

from support_desk.core.realtime.connection import SSEConnection

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


async def stream_events(
    request: Request,
    connection: SSEConnection,
    on_close: Callable[[], None],
    poll_interval: float = 1.0,
) -> AsyncIterator[str]:
    """
    Yield SSE frames from `connection` until the client goes away.

    Args:
        request: Incoming request (polled for disconnect)
        connection: Registered connection to drain
        on_close: Unregisters the connection; always called once
        poll_interval: Max seconds between disconnect checks while idle

    Yields:
        str: Encoded SSE frames
    """
    try:
        while not connection.dead:
            if await request.is_disconnected():
                break
            event = await connection.receive(timeout=poll_interval)
            if event is not None:
                yield event.to_sse()
    finally:
        on_close()
        logger.debug(
            "SSE stream closed",
            extra={"connection_id": connection.id, "session_id": connection.session_id},
        )


def sse_response(events: AsyncIterator[str]) -> StreamingResponse:
    """Wrap an SSE frame iterator in a streaming response."""
    return StreamingResponse(events, media_type="text/event-stream", headers=SSE_HEADERS)
