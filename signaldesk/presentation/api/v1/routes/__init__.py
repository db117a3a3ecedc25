"""API v1 routes."""

from .monitor import router as monitor_router
from .positions import router as positions_router

__all__ = ["monitor_router", "positions_router"]
