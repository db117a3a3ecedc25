"""Unit tests for domain events."""

from dataclasses import FrozenInstanceError
from datetime import timezone
from decimal import Decimal
from uuid import UUID

import pytest

from signaldesk.domain.trading.events import PnLSnapshotEvent, PositionClosedEvent


def _closed_event(**overrides) -> PositionClosedEvent:
    data = {
        "position_id": "T-1",
        "ticker": "AAPL",
        "side": "LONG",
        "exit_reason": "TRAILING",
        "entry_price": Decimal("175.50"),
        "exit_price": Decimal("175.90"),
        "quantity": Decimal("10"),
        "pnl": Decimal("4.00"),
        "pnl_percent": Decimal("0.23"),
        "r_multiple": Decimal("0.11"),
        "holding_period_minutes": 42,
    }
    data.update(overrides)
    return PositionClosedEvent(**data)


class TestDomainEvents:
    def test_event_metadata_is_generated(self):
        event = _closed_event()

        assert isinstance(event.event_id, UUID)
        assert event.occurred_at.tzinfo == timezone.utc
        assert event.event_name == "PositionClosedEvent"

    def test_event_ids_are_unique(self):
        assert _closed_event().event_id != _closed_event().event_id

    def test_events_are_immutable(self):
        event = PnLSnapshotEvent(
            position_id="T-1",
            ticker="AAPL",
            current_price=Decimal("176.00"),
            unrealized_pnl=Decimal("5.00"),
            unrealized_pnl_percent=Decimal("0.28"),
            r_multiple=Decimal("0.14"),
        )

        with pytest.raises(FrozenInstanceError):
            event.unrealized_pnl = Decimal("0")  # type: ignore[misc]
