"""Trailing Stop Tracker - per-position ATR-based trailing watermark.

The watermark starts at the position's static stop-loss and is only ever
moved in the trade's favour (up for LONG, down for SHORT). State is
in-memory; if it is lost (process restart) it is rebuilt from stop_loss on
the next check, temporarily reverting to the static stop.
"""

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional

from ..value_objects import PositionSide, TrailingStopCheck

if TYPE_CHECKING:
    from ..entities import Position

logger = logging.getLogger(__name__)

TRAILING_ATR_MULTIPLIER = Decimal("1.5")
"""Trail distance in ATR units (policy constant)."""


class TrailingStopTracker:
    """Owns the trailing-stop watermark of every monitored position.

    The tracker is the only writer of its map. ``check`` reads and updates
    an entry without awaiting, so asyncio tasks cannot interleave inside
    one update.

    Example:
        >>> tracker = TrailingStopTracker()
        >>> tracker.check(position, Decimal("176.00")).watermark
        Decimal('173.000')
        >>> tracker.release(position.position_id)
    """

    def __init__(self, atr_multiplier: Decimal = TRAILING_ATR_MULTIPLIER) -> None:
        self._atr_multiplier = atr_multiplier
        self._watermarks: dict[str, Decimal] = {}

    def check(self, position: "Position", current_price: Decimal) -> TrailingStopCheck:
        """Advance the watermark and report whether it was crossed.

        Args:
            position: Open position with trailing enabled.
            current_price: Price for this pass (must be positive).

        Returns:
            TrailingStopCheck with the (possibly advanced) watermark.
        """
        key = position.position_id
        watermark = self._watermarks.get(key)
        if watermark is None:
            watermark = position.stop_loss
            self._watermarks[key] = watermark

        is_long = position.side == PositionSide.LONG
        offset = position.atr * self._atr_multiplier

        # Without a volatility unit there is nothing to trail by
        if offset > 0:
            candidate = current_price - offset if is_long else current_price + offset
            if (is_long and candidate > watermark) or (not is_long and candidate < watermark):
                watermark = candidate
                self._watermarks[key] = watermark
                logger.info(
                    "trailing_stop.advanced",
                    extra={
                        "position_id": key,
                        "ticker": position.ticker,
                        "watermark": str(watermark),
                    },
                )

        crossed = current_price <= watermark if is_long else current_price >= watermark
        if crossed:
            return TrailingStopCheck(
                should_exit=True, watermark=watermark, exit_price=current_price
            )

        return TrailingStopCheck(should_exit=False, watermark=watermark)

    def get(self, position_id: str) -> Optional[Decimal]:
        """Current watermark for a position, or None if untracked."""
        return self._watermarks.get(position_id)

    def release(self, position_id: str) -> None:
        """Drop tracking state for a closed position (idempotent)."""
        self._watermarks.pop(position_id, None)

    def retain(self, position_ids: Iterable[str]) -> None:
        """Drop tracking state of every position not in ``position_ids``.

        Called with the current open set, this reclaims entries of
        positions closed outside the monitor.
        """
        keep = set(position_ids)
        stale = [key for key in self._watermarks if key not in keep]
        for key in stale:
            del self._watermarks[key]

        if stale:
            logger.info("trailing_stop.released_stale", extra={"position_ids": stale})

    def __contains__(self, position_id: object) -> bool:
        return position_id in self._watermarks

    def __len__(self) -> int:
        return len(self._watermarks)
