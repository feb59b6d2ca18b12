"""
In-process real-time fan-out.

Exports:
  - SSEConnection: One open SSE stream with a bounded outbound buffer
  - EventHub: Registry of visitor and staff connections with broadcast helpers
  - heartbeat_loop: Background task that keeps idle streams alive

System role: Best-effort live updates for a single server process
"""

from support_desk.core.realtime.connection import SSEConnection
from support_desk.core.realtime.hub import EventHub, heartbeat_loop

__all__ = ["SSEConnection", "EventHub", "heartbeat_loop"]
