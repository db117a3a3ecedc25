"""Event Bus - in-process delivery of domain events.

- Aggregates collect events (PositionClosedEvent)
- The monitor publishes PnLSnapshotEvent once per pass per open position
- Observers (dashboards, notifiers) subscribe; publishers never know them

Events are published after the transaction commits. A failing subscriber
is logged and skipped; it never fails the publisher.
"""

import logging
from collections import defaultdict
from typing import Awaitable, Callable, Iterable, Type

from signaldesk.domain.shared import DomainEvent

logger = logging.getLogger(__name__)

# Event handler signature: async function that takes DomainEvent
EventHandler = Callable[[DomainEvent], Awaitable[None]]


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class EventBus:
    """Event Bus for domain events.

    One instance per application, built in the lifespan and passed to
    whoever publishes or subscribes.

    Example:
        >>> event_bus = EventBus()
        >>> event_bus.subscribe(PositionClosedEvent, notify_dashboard)
        >>> await event_bus.publish_all(position.get_domain_events())
    """

    def __init__(self) -> None:
        self._subscribers: dict[Type[DomainEvent], list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """Subscribe handler to event type.

        Args:
            event_type: Type of event (e.g., PositionClosedEvent).
            handler: Async function to call when event published.
        """
        self._subscribers[event_type].append(handler)
        logger.info(
            "event_bus.subscription_added",
            extra={"event_type": event_type.__name__, "handler": _handler_name(handler)},
        )

    def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        if handler in self._subscribers[event_type]:
            self._subscribers[event_type].remove(handler)
            logger.info(
                "event_bus.subscription_removed",
                extra={"event_type": event_type.__name__, "handler": _handler_name(handler)},
            )

    async def publish(self, event: DomainEvent) -> None:
        """Publish single domain event to every subscriber of its type.

        Args:
            event: Domain event to publish.
        """
        event_type = type(event)
        handlers = list(self._subscribers.get(event_type, []))

        if not handlers:
            logger.debug(
                "event_bus.no_subscribers",
                extra={"event_type": event_type.__name__},
            )
            return

        logger.debug(
            "event_bus.publishing",
            extra={
                "event_type": event_type.__name__,
                "handlers_count": len(handlers),
                "event_id": str(event.event_id),
            },
        )

        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                # Log error but continue with other handlers
                logger.error(
                    "event_bus.handler_failed",
                    extra={
                        "event_type": event_type.__name__,
                        "handler": _handler_name(handler),
                        "error": str(e),
                    },
                    exc_info=True,
                )

    async def publish_all(self, events: Iterable[DomainEvent]) -> None:
        """Publish multiple domain events in order."""
        for event in list(events):
            await self.publish(event)

    def clear_subscribers(self) -> None:
        """Clear all subscribers (useful for testing)."""
        self._subscribers.clear()

    def get_subscribers_count(self, event_type: Type[DomainEvent]) -> int:
        return len(self._subscribers.get(event_type, []))
