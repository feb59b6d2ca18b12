"""
Event hub for live chat updates.

Keeps every open SSE connection in memory: visitor streams grouped by
session ID and staff streams in a flat set (staff see all traffic).
Broadcasts enqueue concurrently on each target; any connection whose
write times out is marked dead and swept after the broadcast. Delivery
is best effort and state is lost on restart; clients reconnect and fall
back to polling.

Dependencies: asyncio, support_desk.core.realtime.connection
System role: In-process pub/sub between HTTP writers and SSE readers
"""

import asyncio
import logging
import time
from typing import Any, Iterable

from support_desk.core.realtime.connection import SSEConnection
from support_desk.models.streaming import StreamEvent

logger = logging.getLogger(__name__)


class EventHub:
    """
    Registry of SSE connections with fan-out helpers.

    Not thread-safe: all calls must happen on the event loop that owns
    the connections.
    """

    def __init__(self, write_timeout: float = 5.0, queue_size: int = 100) -> None:
        """
        Args:
            write_timeout: Seconds a single enqueue may block before the
                connection is considered dead
            queue_size: Buffered events per connection
        """
        self.write_timeout = write_timeout
        self.queue_size = queue_size
        self._session_clients: dict[str, set[SSEConnection]] = {}
        self._staff_clients: set[SSEConnection] = set()

    def _new_connection(self, session_id: str | None) -> SSEConnection:
        return SSEConnection(
            session_id=session_id,
            queue_size=self.queue_size,
            write_timeout=self.write_timeout,
        )

    def add_session_client(self, session_id: str) -> SSEConnection:
        """
        Register a visitor stream and queue its `connected` event.

        Args:
            session_id: Visitor session ID

        Returns:
            SSEConnection: Connection the stream generator should drain
        """
        session_id = str(session_id)
        connection = self._new_connection(session_id)
        self._session_clients.setdefault(session_id, set()).add(connection)
        connection.send_nowait(StreamEvent.connected(session_id))
        logger.info(
            "Visitor SSE connected",
            extra={"session_id": session_id, "connection_id": connection.id},
        )
        return connection

    def remove_session_client(self, session_id: str, connection: SSEConnection) -> None:
        """Unregister a visitor stream; no-op if already removed."""
        session_id = str(session_id)
        connection.close()
        clients = self._session_clients.get(session_id)
        if not clients:
            return
        clients.discard(connection)
        if not clients:
            del self._session_clients[session_id]
        logger.info(
            "Visitor SSE disconnected",
            extra={"session_id": session_id, "connection_id": connection.id},
        )

    def add_staff_client(self) -> SSEConnection:
        """Register a staff stream and queue its `connected` event."""
        connection = self._new_connection(None)
        self._staff_clients.add(connection)
        connection.send_nowait(StreamEvent.connected())
        logger.info("Staff SSE connected", extra={"connection_id": connection.id})
        return connection

    def remove_staff_client(self, connection: SSEConnection) -> None:
        """Unregister a staff stream; no-op if already removed."""
        connection.close()
        if connection in self._staff_clients:
            self._staff_clients.discard(connection)
            logger.info("Staff SSE disconnected", extra={"connection_id": connection.id})

    async def broadcast_message(self, message: dict[str, Any]) -> int:
        """
        Deliver a new chat message to its session's streams and all staff.

        Args:
            message: Serialized message (camelCase, must include `sessionId`)

        Returns:
            int: Number of connections the event was enqueued on
        """
        session_id = str(message.get("sessionId") or message.get("session_id"))
        targets = [*self._session_clients.get(session_id, ()), *self._staff_clients]
        return await self._deliver(targets, StreamEvent.message(message))

    async def broadcast_session_update(self, session: dict[str, Any]) -> int:
        """
        Deliver updated session state to all staff and that session's streams.

        Args:
            session: Serialized session (camelCase, must include `id`)

        Returns:
            int: Number of connections the event was enqueued on
        """
        session_id = str(session.get("id"))
        targets = [*self._staff_clients, *self._session_clients.get(session_id, ())]
        return await self._deliver(targets, StreamEvent.session_update(session))

    async def send_heartbeat(self) -> int:
        """Send a heartbeat to every open stream."""
        targets = [*self._staff_clients]
        for clients in self._session_clients.values():
            targets.extend(clients)
        event = StreamEvent.heartbeat(int(time.time() * 1000))
        return await self._deliver(targets, event)

    def get_connection_stats(self) -> dict[str, int]:
        """
        Snapshot of open connections.

        Returns:
            dict: sessionConnections, staffConnections, totalSessions
        """
        return {
            "sessionConnections": sum(len(c) for c in self._session_clients.values()),
            "staffConnections": len(self._staff_clients),
            "totalSessions": len(self._session_clients),
        }

    async def _deliver(self, targets: Iterable[SSEConnection], event: StreamEvent) -> int:
        targets = [c for c in targets if not c.dead]
        if not targets:
            self._sweep_dead()
            return 0

        results = await asyncio.gather(
            *(connection.send(event) for connection in targets),
            return_exceptions=True,
        )
        delivered = 0
        for connection, result in zip(targets, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "SSE delivery failed",
                    extra={
                        "connection_id": connection.id,
                        "event": event.event.value,
                        "error": str(result),
                    },
                )
                connection.close()
            elif result:
                delivered += 1

        self._sweep_dead()
        return delivered

    def _sweep_dead(self) -> None:
        for session_id in list(self._session_clients):
            alive = {c for c in self._session_clients[session_id] if not c.dead}
            if alive:
                self._session_clients[session_id] = alive
            else:
                del self._session_clients[session_id]
        self._staff_clients = {c for c in self._staff_clients if not c.dead}


async def heartbeat_loop(hub: EventHub, interval: float) -> None:
    """
    Periodically send heartbeats until cancelled.

    Args:
        hub: Event hub to ping
        interval: Seconds between heartbeats
    """
    while True:
        await asyncio.sleep(interval)
        try:
            await hub.send_heartbeat()
        except Exception as e:
            logger.exception("Heartbeat failed", extra={"error": str(e)})
