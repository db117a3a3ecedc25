"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from signaldesk.domain.trading.entities import Position
from signaldesk.domain.trading.value_objects import PositionSide


@pytest.fixture
def make_position():
    """Factory for OPEN positions; keyword overrides win over the defaults.

    Defaults describe the AAPL long used across tests:
    entry 175.50, stop 172.00, target1 180.00, atr 2.0, 10 shares.
    """

    def _make(**overrides) -> Position:
        data = {
            "position_id": "TRD-AAPL-1",
            "signal_id": 1,
            "ticker": "AAPL",
            "side": PositionSide.LONG,
            "quantity": Decimal("10"),
            "entry_price": Decimal("175.50"),
            "stop_loss": Decimal("172.00"),
            "target1": Decimal("180.00"),
            "atr": Decimal("2.0"),
            "trailing_enabled": False,
            "entered_at": datetime.now(timezone.utc) - timedelta(minutes=90),
        }
        data.update(overrides)
        return Position.open(**data)

    return _make


@pytest.fixture
def short_position(make_position):
    """SHORT TSLA: entry 250, stop 255, target1 240, target2 230."""
    return make_position(
        position_id="TRD-TSLA-1",
        ticker="TSLA",
        side=PositionSide.SHORT,
        quantity=Decimal("4"),
        entry_price=Decimal("250.00"),
        stop_loss=Decimal("255.00"),
        target1=Decimal("240.00"),
        target2=Decimal("230.00"),
        atr=Decimal("3.0"),
    )
