"""Exit Condition Evaluator - decides whether and why a position closes."""

from decimal import Decimal
from typing import TYPE_CHECKING

from ..value_objects import ExitDecision, ExitReason, PositionSide
from .trailing_stop import TrailingStopTracker

if TYPE_CHECKING:
    from ..entities import Position


class ExitConditionEvaluator:
    """Evaluate exit rules for one position at one price.

    Rules are checked in a fixed order and the first match wins:

    1. price unavailable (<= 0) → hold
    2. stop-loss → STOP_LOSS
    3. target 1 → TARGET_1
    4. target 2 (if set) → TARGET_2
    5. trailing stop (if enabled) → TRAILING
    6. otherwise hold

    Stop-loss must dominate profit-taking, and the trailing check runs last
    because it is the only rule with a side effect (it advances the
    tracker's watermark).
    """

    def __init__(self, trailing_tracker: TrailingStopTracker) -> None:
        self._trailing = trailing_tracker

    def evaluate(self, position: "Position", current_price: Decimal) -> ExitDecision:
        """Evaluate exit conditions.

        Args:
            position: Open position.
            current_price: Price for this pass.

        Returns:
            ExitDecision; ``exit_price`` is always ``current_price``.
        """
        if current_price <= 0:
            return ExitDecision.hold()

        is_long = position.side == PositionSide.LONG

        if _reached(current_price, position.stop_loss, against=True, is_long=is_long):
            return ExitDecision.exit(ExitReason.STOP_LOSS, current_price)

        if _reached(current_price, position.target1, against=False, is_long=is_long):
            return ExitDecision.exit(ExitReason.TARGET_1, current_price)

        if position.target2 is not None and _reached(
            current_price, position.target2, against=False, is_long=is_long
        ):
            return ExitDecision.exit(ExitReason.TARGET_2, current_price)

        if position.trailing_enabled:
            check = self._trailing.check(position, current_price)
            if check.should_exit:
                return ExitDecision.exit(ExitReason.TRAILING, current_price)

        return ExitDecision.hold()


def _reached(price: Decimal, level: Decimal, *, against: bool, is_long: bool) -> bool:
    """Has price reached ``level``?

    ``against`` levels (stops) sit below entry for LONG and above for SHORT;
    profit targets sit on the other side.
    """
    if is_long == against:
        return price <= level
    return price >= level
