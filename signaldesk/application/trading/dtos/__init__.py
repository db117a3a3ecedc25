"""Data Transfer Objects for application layer."""

from .closed_position_dto import ClosedPositionDTO
from .monitor_status import MonitorStatus

__all__ = ["ClosedPositionDTO", "MonitorStatus"]
