"""ManualClosePosition Command - close an open position on request."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from signaldesk.application.shared import Command


@dataclass(frozen=True)
class ManualClosePositionCommand(Command):
    """Close a position with reason MANUAL.

    Example:
        >>> await handler.handle(ManualClosePositionCommand(position_id="T-1"))
        >>> await handler.handle(
        ...     ManualClosePositionCommand(position_id="T-2", exit_price=Decimal("181.25"))
        ... )
    """

    position_id: str
    """External identifier of the position."""

    exit_price: Optional[Decimal] = None
    """Explicit exit price; when omitted the current market price is used."""
