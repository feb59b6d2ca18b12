"""Push notification clients."""

from support_desk.boundary.push.bark_client import BarkClient

__all__ = ["BarkClient"]
