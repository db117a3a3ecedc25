"""Closed position DTO - outcome of a close for API responses."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from signaldesk.domain.trading.entities import Position


@dataclass
class ClosedPositionDTO:
    """Realized outcome of a closed position."""

    position_id: str
    ticker: str
    side: str
    exit_reason: str
    entry_price: Decimal
    exit_price: Decimal
    exit_value: Decimal
    quantity: Decimal
    pnl: Decimal
    pnl_percent: Decimal
    r_multiple: Decimal
    holding_period_minutes: int
    exited_at: datetime

    @classmethod
    def from_entity(cls, position: Position) -> "ClosedPositionDTO":
        """Build from a CLOSED position."""
        return cls(
            position_id=position.position_id,
            ticker=position.ticker,
            side=position.side.value,
            exit_reason=position.exit_reason.value,
            entry_price=position.entry_price,
            exit_price=position.exit_price,
            exit_value=position.exit_value,
            quantity=position.quantity,
            pnl=position.pnl,
            pnl_percent=position.pnl_percent,
            r_multiple=position.r_multiple,
            holding_period_minutes=position.holding_period_minutes,
            exited_at=position.exited_at,
        )
