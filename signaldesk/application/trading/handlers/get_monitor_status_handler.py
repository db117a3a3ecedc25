"""GetMonitorStatus Handler."""

from signaldesk.application.shared import QueryHandler, UnitOfWorkFactory
from signaldesk.application.trading.dtos import MonitorStatus
from signaldesk.application.trading.queries import GetMonitorStatusQuery
from signaldesk.application.trading.services.position_monitor import PositionMonitor
from signaldesk.domain.trading.services import TrailingStopTracker


class GetMonitorStatusHandler(QueryHandler[GetMonitorStatusQuery, MonitorStatus]):
    """Combine scheduler state with the stored open-position count."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        monitor: PositionMonitor,
        trailing_tracker: TrailingStopTracker,
    ) -> None:
        self.uow_factory = uow_factory
        self.monitor = monitor
        self.trailing_tracker = trailing_tracker

    async def handle(self, query: GetMonitorStatusQuery) -> MonitorStatus:
        async with self.uow_factory() as uow:
            open_count = await uow.positions.count_open()

        return MonitorStatus(
            is_running=self.monitor.is_running,
            open_position_count=open_count,
            interval_seconds=self.monitor.interval_seconds,
            passes_completed=self.monitor.passes_completed,
            passes_failed=self.monitor.passes_failed,
            last_pass_at=self.monitor.last_pass_at,
            tracked_trailing_stops=len(self.trailing_tracker),
        )
