"""Position Closer - durably commits a position's exit exactly once."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from signaldesk.application.shared import UnitOfWorkFactory
from signaldesk.domain.trading.entities import Position
from signaldesk.domain.trading.services import TrailingStopTracker
from signaldesk.domain.trading.value_objects import ExitReason
from signaldesk.infrastructure.messaging import EventBus

logger = logging.getLogger(__name__)


class PositionCloser:
    """Closes positions in one transaction with a conditional write.

    Flow:
    1. Transition the aggregate OPEN → CLOSED in memory (computes P&L,
       exit value and holding period)
    2. UPDATE ... WHERE position_id = :id AND status = 'OPEN'
    3. Commit, log ``position.closed``, publish PositionClosedEvent

    Trailing-stop state is released once the position is known to be
    CLOSED in the store. A persistence error keeps it, so the exit is
    retried against the same watermark on the next pass.

    Example:
        >>> closer = PositionCloser(uow_factory, tracker, event_bus)
        >>> await closer.close(position, Decimal("175.90"), ExitReason.TRAILING)
        True
        >>> await closer.close(stale_copy, Decimal("175.90"), ExitReason.TRAILING)
        False
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        trailing_tracker: TrailingStopTracker,
        event_bus: EventBus,
    ) -> None:
        self._uow_factory = uow_factory
        self._tracker = trailing_tracker
        self._event_bus = event_bus

    async def close(
        self,
        position: Position,
        exit_price: Decimal,
        exit_reason: ExitReason,
        closed_at: Optional[datetime] = None,
    ) -> bool:
        """Close ``position`` at ``exit_price``.

        Args:
            position: Position loaded as OPEN.
            exit_price: Price the position exits at.
            exit_reason: Why it exits.
            closed_at: Close timestamp (defaults to now, UTC).

        Returns:
            True if this call closed the position; False if it was already
            closed (in memory or in the store). The False case is benign.

        Raises:
            Exception: Persistence errors propagate after rollback; the
                position stays OPEN in the store.
        """
        if not position.is_open:
            logger.info(
                "position_closer.already_closed",
                extra={"position_id": position.position_id, "status": position.status.value},
            )
            self._tracker.release(position.position_id)
            return False

        position.close(exit_price, exit_reason, closed_at=closed_at)

        async with self._uow_factory() as uow:
            updated = await uow.positions.update_on_close(position)
            if not updated:
                logger.info(
                    "position_closer.close_skipped",
                    extra={
                        "position_id": position.position_id,
                        "exit_reason": exit_reason.value,
                    },
                )
                position.clear_domain_events()
                self._tracker.release(position.position_id)
                return False

            await uow.commit()

        self._tracker.release(position.position_id)

        logger.info(
            "position.closed",
            extra={
                "position_id": position.position_id,
                "ticker": position.ticker,
                "side": position.side.value,
                "exit_reason": exit_reason.value,
                "exit_price": str(exit_price),
                "pnl": str(position.pnl),
                "r_multiple": str(position.r_multiple),
                "holding_period_minutes": position.holding_period_minutes,
            },
        )

        events = position.get_domain_events()
        position.clear_domain_events()
        await self._event_bus.publish_all(events)

        return True
