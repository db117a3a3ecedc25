"""Exit Engine - control surface over the monitor and the close use cases."""

from decimal import Decimal
from typing import Optional

from signaldesk.application.shared import UnitOfWorkFactory
from signaldesk.domain.market_data.ports import PriceSource
from signaldesk.domain.trading.services import ExitConditionEvaluator, TrailingStopTracker
from signaldesk.infrastructure.messaging import EventBus

from .commands import EnableTrailingStopCommand, ManualClosePositionCommand
from .dtos import ClosedPositionDTO, MonitorStatus
from .handlers import (
    EnableTrailingStopHandler,
    GetMonitorStatusHandler,
    ManualClosePositionHandler,
)
from .queries import GetMonitorStatusQuery
from .services import PositionCloser, PositionMonitor
from .services.position_monitor import DEFAULT_INTERVAL_SECONDS


class ExitEngine:
    """Owns one tracker, one monitor and the handlers that share them.

    Built once per process (application lifespan) and passed to whoever
    needs it; there is no module-level engine state.

    Example:
        >>> engine = ExitEngine.build(uow_factory, price_source, EventBus())
        >>> engine.start_trade_monitor()
        True
        >>> await engine.manual_close_trade("T-1")
        ClosedPositionDTO(position_id='T-1', ..., exit_reason='MANUAL', ...)
        >>> await engine.get_monitor_status()
        MonitorStatus(is_running=True, open_position_count=3, ...)
        >>> await engine.aclose()
    """

    def __init__(
        self,
        monitor: PositionMonitor,
        trailing_tracker: TrailingStopTracker,
        manual_close_handler: ManualClosePositionHandler,
        enable_trailing_handler: EnableTrailingStopHandler,
        status_handler: GetMonitorStatusHandler,
    ) -> None:
        self.monitor = monitor
        self.trailing_tracker = trailing_tracker
        self._manual_close_handler = manual_close_handler
        self._enable_trailing_handler = enable_trailing_handler
        self._status_handler = status_handler

    @classmethod
    def build(
        cls,
        uow_factory: UnitOfWorkFactory,
        price_source: PriceSource,
        event_bus: EventBus,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        trailing_tracker: Optional[TrailingStopTracker] = None,
    ) -> "ExitEngine":
        """Wire the engine's collaborators.

        Args:
            uow_factory: Returns a fresh Unit of Work per call.
            price_source: Current prices (None when unavailable).
            event_bus: Receives PositionClosedEvent and PnLSnapshotEvent.
            interval_seconds: Seconds between monitoring passes.
            trailing_tracker: Tracker to use (a new one by default).

        Returns:
            ExitEngine with the monitor STOPPED.
        """
        tracker = trailing_tracker or TrailingStopTracker()
        closer = PositionCloser(uow_factory, tracker, event_bus)
        monitor = PositionMonitor(
            uow_factory=uow_factory,
            price_source=price_source,
            evaluator=ExitConditionEvaluator(tracker),
            closer=closer,
            event_bus=event_bus,
            trailing_tracker=tracker,
            interval_seconds=interval_seconds,
        )

        return cls(
            monitor=monitor,
            trailing_tracker=tracker,
            manual_close_handler=ManualClosePositionHandler(uow_factory, price_source, closer),
            enable_trailing_handler=EnableTrailingStopHandler(uow_factory),
            status_handler=GetMonitorStatusHandler(uow_factory, monitor, tracker),
        )

    def start_trade_monitor(self) -> bool:
        """Start monitoring; False if it was already running."""
        return self.monitor.start()

    def stop_trade_monitor(self) -> bool:
        """Stop monitoring; False if it was not running."""
        return self.monitor.stop()

    async def manual_close_trade(
        self, position_id: str, exit_price: Optional[Decimal] = None
    ) -> ClosedPositionDTO:
        """Close a position with reason MANUAL.

        Raises:
            PositionNotFoundError, PositionAlreadyClosedError,
            PriceUnavailableError, BusinessRuleViolation.
        """
        return await self._manual_close_handler.handle(
            ManualClosePositionCommand(position_id=position_id, exit_price=exit_price)
        )

    async def get_monitor_status(self) -> MonitorStatus:
        return await self._status_handler.handle(GetMonitorStatusQuery())

    async def enable_trailing_stop(self, position_id: str) -> None:
        await self._enable_trailing_handler.handle(
            EnableTrailingStopCommand(position_id=position_id)
        )

    async def aclose(self) -> None:
        """Stop the monitor and wait for the in-flight pass."""
        await self.monitor.aclose()
