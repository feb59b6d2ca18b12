"""Shared helpers for API routers."""

from support_desk.api.routers.router_utils.error_handling import handle_api_errors
from support_desk.api.routers.router_utils.serializers import (
    message_payload,
    session_payload,
)
from support_desk.api.routers.router_utils.sse_utils import sse_response, stream_events

__all__ = [
    "handle_api_errors",
    "message_payload",
    "session_payload",
    "sse_response",
    "stream_events",
]
