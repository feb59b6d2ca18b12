"""
Single SSE connection.

Each open stream owns a bounded asyncio.Queue. Producers enqueue with a
write timeout; a producer that cannot enqueue in time marks the
connection dead so the hub can drop it on the next sweep. The HTTP
stream generator drains the queue.

Dependencies: asyncio, support_desk.models.streaming
System role: Per-client outbound event buffer
"""

import asyncio
import logging
import uuid

from support_desk.models.streaming import StreamEvent

logger = logging.getLogger(__name__)


class SSEConnection:
    """
    Outbound event buffer for one connected client.

    Attributes:
        id: Connection identifier (for logs)
        session_id: Visitor session the stream belongs to, None for staff
        dead: True once a write timed out or the client went away
    """

    def __init__(
        self,
        session_id: str | None = None,
        queue_size: int = 100,
        write_timeout: float = 5.0,
    ) -> None:
        self.id = uuid.uuid4().hex[:12]
        self.session_id = session_id
        self.write_timeout = write_timeout
        self.dead = False
        self._queue: asyncio.Queue[StreamEvent] = asyncio.Queue(maxsize=queue_size)

    async def send(self, event: StreamEvent) -> bool:
        """
        Enqueue an event for this client.

        Args:
            event: Event to deliver

        Returns:
            bool: True if enqueued, False if the connection is (now) dead
        """
        if self.dead:
            return False
        try:
            await asyncio.wait_for(self._queue.put(event), timeout=self.write_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "SSE write timed out, marking connection dead",
                extra={"connection_id": self.id, "session_id": self.session_id},
            )
            self.dead = True
            return False
        return True

    def send_nowait(self, event: StreamEvent) -> bool:
        """Enqueue without waiting; marks the connection dead when full."""
        if self.dead:
            return False
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dead = True
            return False
        return True

    async def receive(self, timeout: float | None = None) -> StreamEvent | None:
        """
        Wait for the next event.

        Args:
            timeout: Seconds to wait, None to wait forever

        Returns:
            StreamEvent | None: Next event, or None on timeout
        """
        try:
            return await asyncio.wait_for(self._queue.get(), timeout=timeout)
        except asyncio.TimeoutError:
            return None

    def close(self) -> None:
        self.dead = True

    def __repr__(self) -> str:
        return f"SSEConnection(id={self.id!r}, session_id={self.session_id!r}, dead={self.dead})"
