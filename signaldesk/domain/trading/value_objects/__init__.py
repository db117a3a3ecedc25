"""Value objects for the Trading bounded context."""

from .enums import ExitReason, PositionSide, PositionStatus
from .exit_values import ExitDecision, PnLResult, PnLSnapshot, TrailingStopCheck

__all__ = [
    "PositionStatus",
    "PositionSide",
    "ExitReason",
    "ExitDecision",
    "TrailingStopCheck",
    "PnLResult",
    "PnLSnapshot",
]
