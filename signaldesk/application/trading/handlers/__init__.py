"""Trading use case handlers."""

from .enable_trailing_stop_handler import EnableTrailingStopHandler
from .get_monitor_status_handler import GetMonitorStatusHandler
from .manual_close_handler import ManualClosePositionHandler

__all__ = [
    "ManualClosePositionHandler",
    "EnableTrailingStopHandler",
    "GetMonitorStatusHandler",
]
