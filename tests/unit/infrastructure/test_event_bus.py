"""Tests for the in-process event bus."""

from decimal import Decimal

import pytest

from signaldesk.domain.trading.events import PnLSnapshotEvent, PositionClosedEvent
from signaldesk.infrastructure.messaging import EventBus


def snapshot_event(position_id="TRD-AAPL-1"):
    return PnLSnapshotEvent(
        position_id=position_id,
        ticker="AAPL",
        current_price=Decimal("176.00"),
        unrealized_pnl=Decimal("5.00"),
        unrealized_pnl_percent=Decimal("0.28"),
        r_multiple=Decimal("0.14"),
    )


class TestEventBus:
    @pytest.mark.asyncio
    async def test_publish_reaches_subscribers_of_type(self):
        bus = EventBus()
        received = []

        async def on_snapshot(event):
            received.append(event)

        async def on_closed(event):
            received.append(("closed", event))

        bus.subscribe(PnLSnapshotEvent, on_snapshot)
        bus.subscribe(PositionClosedEvent, on_closed)

        event = snapshot_event()
        await bus.publish(event)

        assert received == [event]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self):
        bus = EventBus()
        received = []

        async def broken(event):
            raise RuntimeError("dashboard offline")

        async def healthy(event):
            received.append(event.position_id)

        bus.subscribe(PnLSnapshotEvent, broken)
        bus.subscribe(PnLSnapshotEvent, healthy)

        await bus.publish(snapshot_event())

        assert received == ["TRD-AAPL-1"]

    @pytest.mark.asyncio
    async def test_publish_all_keeps_order(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event.position_id)

        bus.subscribe(PnLSnapshotEvent, handler)

        await bus.publish_all([snapshot_event("A"), snapshot_event("B")])

        assert received == ["A", "B"]

    @pytest.mark.asyncio
    async def test_publish_without_subscribers_is_noop(self):
        await EventBus().publish(snapshot_event())

    def test_unsubscribe_and_clear(self):
        bus = EventBus()

        async def handler(event):
            pass

        bus.subscribe(PnLSnapshotEvent, handler)
        assert bus.get_subscribers_count(PnLSnapshotEvent) == 1

        bus.unsubscribe(PnLSnapshotEvent, handler)
        assert bus.get_subscribers_count(PnLSnapshotEvent) == 0

        bus.subscribe(PnLSnapshotEvent, handler)
        bus.clear_subscribers()
        assert bus.get_subscribers_count(PnLSnapshotEvent) == 0

    def test_buses_are_independent(self):
        first, second = EventBus(), EventBus()

        async def handler(event):
            pass

        first.subscribe(PnLSnapshotEvent, handler)

        assert second.get_subscribers_count(PnLSnapshotEvent) == 0
