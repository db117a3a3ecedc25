"""Trading commands (write operations)."""

from .enable_trailing_stop import EnableTrailingStopCommand
from .manual_close_position import ManualClosePositionCommand

__all__ = ["ManualClosePositionCommand", "EnableTrailingStopCommand"]
