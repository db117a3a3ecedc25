"""Domain events for the Trading bounded context."""

from .position_events import PnLSnapshotEvent, PositionClosedEvent

__all__ = [
    "PositionClosedEvent",
    "PnLSnapshotEvent",
]
