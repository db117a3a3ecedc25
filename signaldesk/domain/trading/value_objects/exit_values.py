"""Value objects produced by the exit engine.

None of these are persisted: they live for a single evaluation or a
single monitoring pass.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from signaldesk.domain.shared import ValueObject, validate_value_object

from .enums import ExitReason


@dataclass(frozen=True)
class ExitDecision(ValueObject):
    """Outcome of evaluating one position against one price.

    ``reason`` and ``exit_price`` are set only when ``should_exit`` is True.
    """

    should_exit: bool
    reason: Optional[ExitReason] = None
    exit_price: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if self.should_exit:
            validate_value_object(
                self.reason is not None and self.exit_price is not None,
                "Exit decision requires reason and exit_price",
            )

    @classmethod
    def hold(cls) -> "ExitDecision":
        """Decision to keep the position open."""
        return cls(should_exit=False)

    @classmethod
    def exit(cls, reason: ExitReason, exit_price: Decimal) -> "ExitDecision":
        """Decision to close at ``exit_price`` for ``reason``."""
        return cls(should_exit=True, reason=reason, exit_price=exit_price)


@dataclass(frozen=True)
class TrailingStopCheck(ValueObject):
    """Result of a trailing-stop check."""

    should_exit: bool
    watermark: Decimal
    exit_price: Optional[Decimal] = None


@dataclass(frozen=True)
class PnLResult(ValueObject):
    """Profit figures for a position at a given price."""

    pnl: Decimal
    pnl_percent: Decimal
    r_multiple: Decimal


@dataclass(frozen=True)
class PnLSnapshot(ValueObject):
    """Unrealized P&L of an open position, produced once per pass."""

    position_id: str
    current_price: Decimal
    unrealized_pnl: Decimal
    unrealized_pnl_percent: Decimal
    r_multiple: Decimal
