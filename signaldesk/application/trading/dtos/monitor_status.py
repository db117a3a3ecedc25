"""Monitor status DTO."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class MonitorStatus:
    """Point-in-time view of the exit engine."""

    is_running: bool
    open_position_count: int
    interval_seconds: float
    passes_completed: int = 0
    passes_failed: int = 0
    last_pass_at: Optional[datetime] = None
    tracked_trailing_stops: int = 0
