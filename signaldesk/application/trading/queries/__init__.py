"""Trading queries (read operations)."""

from .get_monitor_status import GetMonitorStatusQuery

__all__ = ["GetMonitorStatusQuery"]
