"""API routers."""

from .chat import router as chat_router
from .health import router as health_router
from .staff import router as staff_router
from .uploads import router as uploads_router

__all__ = [
    "chat_router",
    "health_router",
    "staff_router",
    "uploads_router",
]
