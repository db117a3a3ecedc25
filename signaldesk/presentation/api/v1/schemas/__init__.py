"""API v1 schemas."""

from .exit_engine_schemas import (
    ClosedPositionResponse,
    ErrorResponse,
    ManualCloseRequest,
    MonitorActionResponse,
    MonitorStatusResponse,
    TrailingStopResponse,
)

__all__ = [
    "ManualCloseRequest",
    "MonitorStatusResponse",
    "MonitorActionResponse",
    "ClosedPositionResponse",
    "TrailingStopResponse",
    "ErrorResponse",
]
