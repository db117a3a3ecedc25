"""Domain services for the Trading bounded context."""

from .exit_evaluator import ExitConditionEvaluator
from .pnl_calculator import compute_pnl, snapshot
from .trailing_stop import TRAILING_ATR_MULTIPLIER, TrailingStopTracker

__all__ = [
    "ExitConditionEvaluator",
    "TrailingStopTracker",
    "TRAILING_ATR_MULTIPLIER",
    "compute_pnl",
    "snapshot",
]
