"""Position Aggregate Root - a simulated (paper) market exposure.

Position is responsible for:
- Static entry terms (set at open, never mutated afterwards)
- The one-way lifecycle transition OPEN → CLOSED
- Realized outcome fields written at close
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from signaldesk.domain.shared import AggregateRoot

from ..events import PositionClosedEvent
from ..exceptions import PositionAlreadyClosedError
from ..services.pnl_calculator import compute_pnl
from ..value_objects import ExitReason, PositionSide, PositionStatus


class Position(AggregateRoot):
    """Position Aggregate Root.

    Rules:
    - ``position_id`` is the stable external identifier; ``id`` is the
      storage key assigned by the repository
    - Entry terms (ticker, side, quantity, prices, trailing flag) are
      fixed once the position exists
    - ``exit_reason`` is set if and only if status is CLOSED
    - LONG positions expect stop_loss < entry_price < target1 (< target2),
      SHORT the reverse; the opener guarantees it, exit logic relies on it

    Example:
        >>> position = Position.open(
        ...     position_id="T-1",
        ...     signal_id=7,
        ...     ticker="AAPL",
        ...     side=PositionSide.LONG,
        ...     quantity=Decimal("10"),
        ...     entry_price=Decimal("175.50"),
        ...     stop_loss=Decimal("172.00"),
        ...     target1=Decimal("180.00"),
        ...     atr=Decimal("2.0"),
        ...     trailing_enabled=True,
        ... )
        >>> position.close(Decimal("180.00"), ExitReason.TARGET_1)
        >>> position.status
        <PositionStatus.CLOSED: 'CLOSED'>
    """

    def __init__(
        self,
        position_id: str,
        signal_id: int,
        ticker: str,
        side: PositionSide,
        quantity: Decimal,
        entry_price: Decimal,
        stop_loss: Decimal,
        target1: Decimal,
        entered_at: datetime,
        atr: Decimal = Decimal("0"),
        target2: Optional[Decimal] = None,
        trailing_enabled: bool = False,
        status: PositionStatus = PositionStatus.OPEN,
        exited_at: Optional[datetime] = None,
        exit_price: Optional[Decimal] = None,
        exit_value: Optional[Decimal] = None,
        exit_reason: Optional[ExitReason] = None,
        pnl: Optional[Decimal] = None,
        pnl_percent: Optional[Decimal] = None,
        r_multiple: Optional[Decimal] = None,
        holding_period_minutes: Optional[int] = None,
        id: Optional[int] = None,
    ) -> None:
        """Initialize position.

        Args:
            position_id: External identifier (e.g. "TRD-20260102-0001").
            signal_id: Storage key of the originating signal.
            ticker: Instrument symbol.
            side: LONG or SHORT.
            quantity: Units held.
            entry_price: Fill price at open.
            stop_loss: Static protective stop.
            target1: First profit target.
            entered_at: Open timestamp (UTC).
            atr: Average true range read from the signal.
            target2: Optional second profit target.
            trailing_enabled: Whether the trailing-stop rule applies.
            status: Lifecycle status (OPEN for new positions).
            exited_at: Close timestamp.
            exit_price: Price used for the close.
            exit_value: exit_price * quantity.
            exit_reason: Why the position closed.
            pnl: Realized profit.
            pnl_percent: Realized return in percent of entry.
            r_multiple: Realized return in units of initial risk.
            holding_period_minutes: Whole minutes between entry and exit.
            id: Storage key.
        """
        super().__init__(id)

        self.position_id = position_id
        self.signal_id = signal_id
        self.ticker = ticker
        self.side = side
        self.quantity = quantity
        self.entry_price = entry_price
        self.stop_loss = stop_loss
        self.target1 = target1
        self.target2 = target2
        self.trailing_enabled = trailing_enabled
        self.entered_at = entered_at
        self.atr = atr

        # Lifecycle
        self.status = status
        self.exited_at = exited_at
        self.exit_price = exit_price
        self.exit_value = exit_value
        self.exit_reason = exit_reason
        self.pnl = pnl
        self.pnl_percent = pnl_percent
        self.r_multiple = r_multiple
        self.holding_period_minutes = holding_period_minutes

    @classmethod
    def open(
        cls,
        position_id: str,
        signal_id: int,
        ticker: str,
        side: PositionSide,
        quantity: Decimal,
        entry_price: Decimal,
        stop_loss: Decimal,
        target1: Decimal,
        atr: Decimal = Decimal("0"),
        target2: Optional[Decimal] = None,
        trailing_enabled: bool = False,
        entered_at: Optional[datetime] = None,
    ) -> "Position":
        """Factory for a new OPEN position.

        Returns:
            Position in OPEN status, not yet persisted.
        """
        return cls(
            position_id=position_id,
            signal_id=signal_id,
            ticker=ticker,
            side=side,
            quantity=quantity,
            entry_price=entry_price,
            stop_loss=stop_loss,
            target1=target1,
            target2=target2,
            atr=atr,
            trailing_enabled=trailing_enabled,
            entered_at=entered_at or datetime.now(timezone.utc),
        )

    def close(
        self,
        exit_price: Decimal,
        exit_reason: ExitReason,
        closed_at: Optional[datetime] = None,
    ) -> None:
        """Close the position and fill in the realized outcome.

        Args:
            exit_price: Price the position exits at.
            exit_reason: Why it exits.
            closed_at: Close timestamp (defaults to now, UTC).

        Raises:
            PositionAlreadyClosedError: If the position is not OPEN.
        """
        if self.status != PositionStatus.OPEN:
            raise PositionAlreadyClosedError(
                "Position already closed",
                position_id=self.position_id,
                status=self.status.value,
            )

        closed_at = closed_at or datetime.now(timezone.utc)
        result = compute_pnl(self, exit_price)

        self.status = PositionStatus.CLOSED
        self.exited_at = closed_at
        self.exit_price = exit_price
        self.exit_value = exit_price * self.quantity
        self.exit_reason = exit_reason
        self.pnl = result.pnl
        self.pnl_percent = result.pnl_percent
        self.r_multiple = result.r_multiple
        self.holding_period_minutes = self.holding_minutes_at(closed_at)

        self.add_domain_event(
            PositionClosedEvent(
                position_id=self.position_id,
                ticker=self.ticker,
                side=self.side.value,
                exit_reason=exit_reason.value,
                entry_price=self.entry_price,
                exit_price=exit_price,
                quantity=self.quantity,
                pnl=result.pnl,
                pnl_percent=result.pnl_percent,
                r_multiple=result.r_multiple,
                holding_period_minutes=self.holding_period_minutes,
            )
        )

    def holding_minutes_at(self, moment: datetime) -> int:
        """Whole minutes elapsed between entry and ``moment`` (floored)."""
        elapsed = moment - self.entered_at
        return int(elapsed.total_seconds() // 60)

    @property
    def is_open(self) -> bool:
        """Check if position is OPEN."""
        return self.status == PositionStatus.OPEN

    @property
    def is_closed(self) -> bool:
        """Check if position is CLOSED."""
        return self.status == PositionStatus.CLOSED

    @property
    def is_long(self) -> bool:
        return self.side == PositionSide.LONG

    @property
    def entry_value(self) -> Decimal:
        """Notional value at entry."""
        return self.entry_price * self.quantity

    def __repr__(self) -> str:
        return (
            f"Position(id={self.id}, position_id={self.position_id}, ticker={self.ticker}, "
            f"side={self.side.value}, status={self.status.value})"
        )
