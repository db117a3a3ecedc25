"""Base DomainEvent class for event-driven decoupling.

Events are named for what happened (PositionClosed, PnLSnapshot)
and carry everything a subscriber needs, so the domain never has to know
who is listening.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent(ABC):
    """Base class for all domain events.

    Example:
        >>> @dataclass(frozen=True)
        ... class PositionClosedEvent(DomainEvent):
        ...     position_id: str
        ...     exit_reason: str

        >>> event_bus.subscribe(PositionClosedEvent, notify_dashboard)
    """

    event_id: UUID = field(default_factory=uuid4, init=False)
    """Unique event ID (auto-generated)."""

    occurred_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), init=False
    )
    """When the event happened (auto-generated, UTC)."""

    @property
    def event_name(self) -> str:
        """Event class name, e.g. "PositionClosedEvent"."""
        return self.__class__.__name__

    def __repr__(self) -> str:
        return f"{self.event_name}(event_id={self.event_id}, occurred_at={self.occurred_at})"
