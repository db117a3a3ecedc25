"""EnableTrailingStop Command - switch on the trailing rule of a position."""

from dataclasses import dataclass

from signaldesk.application.shared import Command


@dataclass(frozen=True)
class EnableTrailingStopCommand(Command):
    position_id: str
