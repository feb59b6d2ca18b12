"""
Server-Sent Event schemas for live chat updates.

Defines event types and the wire encoding used on the visitor and staff
SSE streams.

Dependencies: pydantic
System role: Streaming protocol schemas
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel


class StreamEventType(str, Enum):
    """Server-to-client event types."""

    CONNECTED = "connected"
    MESSAGE = "message"
    SESSION_UPDATE = "session_update"
    HEARTBEAT = "heartbeat"


class StreamEvent(BaseModel):
    """
    A single SSE event.

    `data` always carries a `type` key equal to the event name so that
    clients reading the default `message` channel can still dispatch.

    Attributes:
        event: Event type identifier
        data: JSON-serializable payload
    """

    event: StreamEventType
    data: dict[str, Any]

    def to_sse(self) -> str:
        """Encode as an SSE frame."""
        payload = json.dumps(self.data, ensure_ascii=False, default=str)
        return f"event: {self.event.value}\ndata: {payload}\n\n"

    @classmethod
    def connected(cls, session_id: str | None = None) -> "StreamEvent":
        data: dict[str, Any] = {"type": StreamEventType.CONNECTED.value}
        if session_id is not None:
            data["sessionId"] = session_id
        return cls(event=StreamEventType.CONNECTED, data=data)

    @classmethod
    def message(cls, message: dict[str, Any]) -> "StreamEvent":
        return cls(
            event=StreamEventType.MESSAGE,
            data={"type": StreamEventType.MESSAGE.value, "message": message},
        )

    @classmethod
    def session_update(cls, session: dict[str, Any]) -> "StreamEvent":
        return cls(
            event=StreamEventType.SESSION_UPDATE,
            data={"type": StreamEventType.SESSION_UPDATE.value, "session": session},
        )

    @classmethod
    def heartbeat(cls, timestamp_ms: int) -> "StreamEvent":
        return cls(
            event=StreamEventType.HEARTBEAT,
            data={"type": StreamEventType.HEARTBEAT.value, "timestamp": timestamp_ms},
        )
