"""Base AggregateRoot class for the domain model.

An aggregate root guards the consistency of everything it owns and records
domain events about its own state changes. Events stay on the aggregate
until the application layer publishes them after a successful commit.
"""

from typing import List

from .domain_event import DomainEvent
from .entity import Entity


class AggregateRoot(Entity):
    """Base class for aggregate roots.

    Example:
        >>> position = Position.open(...)
        >>> position.close(exit_price, ExitReason.TARGET_1)
        >>> events = position.get_domain_events()  # [PositionClosedEvent]
        >>> await event_bus.publish_all(events)
        >>> position.clear_domain_events()
    """

    def __init__(self, id: int | None = None) -> None:
        super().__init__(id)
        self._domain_events: List[DomainEvent] = []

    def add_domain_event(self, event: DomainEvent) -> None:
        """Record a domain event.

        Args:
            event: Domain event to add.
        """
        self._domain_events.append(event)

    def get_domain_events(self) -> List[DomainEvent]:
        """Get all pending domain events.

        Returns:
            Copy of the events recorded since the last clear.
        """
        return self._domain_events.copy()

    def clear_domain_events(self) -> None:
        """Clear pending events so they are not published twice."""
        self._domain_events.clear()

    @property
    def has_domain_events(self) -> bool:
        """Check if aggregate has pending domain events."""
        return len(self._domain_events) > 0
