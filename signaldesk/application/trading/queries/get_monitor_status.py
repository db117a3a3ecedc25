"""GetMonitorStatus Query - scheduler state plus open position count."""

from dataclasses import dataclass

from signaldesk.application.shared import Query


@dataclass(frozen=True)
class GetMonitorStatusQuery(Query):
    pass
