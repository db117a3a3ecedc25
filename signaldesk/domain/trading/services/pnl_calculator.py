"""P&L Calculator - profit, percent return and R-multiple.

Same formula for interim (unrealized) snapshots and for the final
(realized) figures written at close; only the price argument differs.
"""

from decimal import Decimal
from typing import TYPE_CHECKING

from ..value_objects import PnLResult, PnLSnapshot, PositionSide

if TYPE_CHECKING:
    from ..entities import Position

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def compute_pnl(position: "Position", price: Decimal) -> PnLResult:
    """Compute P&L of ``position`` valued at ``price``.

    Args:
        position: Position (open or being closed).
        price: Current market price or exit price.

    Returns:
        PnLResult with pnl, pnl_percent and r_multiple.

    Example:
        >>> # LONG 10 @ 100, stop 98, price 104
        >>> compute_pnl(position, Decimal("104"))
        PnLResult(pnl=Decimal('40'), pnl_percent=Decimal('4'), r_multiple=Decimal('2'))
    """
    if position.side == PositionSide.LONG:
        price_diff = price - position.entry_price
    else:
        price_diff = position.entry_price - price

    pnl = price_diff * position.quantity
    pnl_percent = price_diff / position.entry_price * _HUNDRED

    # R-multiple: return expressed in units of the originally risked amount
    risk_per_unit = abs(position.entry_price - position.stop_loss)
    r_multiple = price_diff / risk_per_unit if risk_per_unit > _ZERO else _ZERO

    return PnLResult(pnl=pnl, pnl_percent=pnl_percent, r_multiple=r_multiple)


def snapshot(position: "Position", current_price: Decimal) -> PnLSnapshot:
    """Build the unrealized P&L snapshot published for observers."""
    result = compute_pnl(position, current_price)
    return PnLSnapshot(
        position_id=position.position_id,
        current_price=current_price,
        unrealized_pnl=result.pnl,
        unrealized_pnl_percent=result.pnl_percent,
        r_multiple=result.r_multiple,
    )
