"""Trading application layer - exit engine use cases."""

from .dtos import ClosedPositionDTO, MonitorStatus
from .exit_engine import ExitEngine

__all__ = ["ExitEngine", "MonitorStatus", "ClosedPositionDTO"]
