"""Domain Events for the Position lifecycle."""

from dataclasses import dataclass
from decimal import Decimal

from signaldesk.domain.shared import DomainEvent


@dataclass(frozen=True)
class PositionClosedEvent(DomainEvent):
    """Event: position closed, outcome is final.

    Published only after the conditional close was committed, so a
    position produces at most one of these.
    """

    position_id: str
    ticker: str
    side: str
    exit_reason: str
    entry_price: Decimal
    exit_price: Decimal
    quantity: Decimal
    pnl: Decimal
    pnl_percent: Decimal
    r_multiple: Decimal
    holding_period_minutes: int


@dataclass(frozen=True)
class PnLSnapshotEvent(DomainEvent):
    """Event: unrealized P&L of an open position for this pass.

    Subscribers (dashboards, alerting) must treat it as a point-in-time
    reading; no ordering across passes is promised.
    """

    position_id: str
    ticker: str
    current_price: Decimal
    unrealized_pnl: Decimal
    unrealized_pnl_percent: Decimal
    r_multiple: Decimal
