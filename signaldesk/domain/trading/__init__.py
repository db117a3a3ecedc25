"""Trading Bounded Context - Domain Layer.

Exports:
    Entities: Position (Aggregate Root)
    Value Objects: PositionStatus, PositionSide, ExitReason, ExitDecision,
        TrailingStopCheck, PnLResult, PnLSnapshot
    Services: ExitConditionEvaluator, TrailingStopTracker, compute_pnl
    Exceptions: PositionNotFoundError, PositionAlreadyClosedError, PriceUnavailableError
    Events: PositionClosedEvent, PnLSnapshotEvent
    Repositories: PositionRepository (interface)
"""

# Value Objects
from .value_objects import (
    ExitDecision,
    ExitReason,
    PnLResult,
    PnLSnapshot,
    PositionSide,
    PositionStatus,
    TrailingStopCheck,
)

# Entities (Aggregate Roots)
from .entities import Position

# Domain services
from .services import (
    TRAILING_ATR_MULTIPLIER,
    ExitConditionEvaluator,
    TrailingStopTracker,
    compute_pnl,
    snapshot,
)

# Exceptions
from .exceptions import (
    PositionAlreadyClosedError,
    PositionNotFoundError,
    PriceUnavailableError,
)

# Events
from .events import PnLSnapshotEvent, PositionClosedEvent

# Repository interfaces
from .repositories import PositionRepository

__all__ = [
    # Entities
    "Position",
    # Value Objects
    "PositionStatus",
    "PositionSide",
    "ExitReason",
    "ExitDecision",
    "TrailingStopCheck",
    "PnLResult",
    "PnLSnapshot",
    # Services
    "ExitConditionEvaluator",
    "TrailingStopTracker",
    "TRAILING_ATR_MULTIPLIER",
    "compute_pnl",
    "snapshot",
    # Exceptions
    "PositionNotFoundError",
    "PositionAlreadyClosedError",
    "PriceUnavailableError",
    # Events
    "PositionClosedEvent",
    "PnLSnapshotEvent",
    # Repositories
    "PositionRepository",
]
