"""Exit engine application services."""

from .position_closer import PositionCloser
from .position_monitor import MonitorState, PositionMonitor, group_by_ticker

__all__ = [
    "PositionCloser",
    "PositionMonitor",
    "MonitorState",
    "group_by_ticker",
]
