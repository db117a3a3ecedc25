"""Base Command class for the CQRS pattern.

Command - a request to change system state (write operation).
"""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True)
class Command(ABC):
    """Base class for all commands.

    Commands are immutable, verb-named (ManualClosePosition, not Position)
    and carry data only; the logic lives in the handler.

    Example:
        >>> @dataclass(frozen=True)
        ... class ManualClosePositionCommand(Command):
        ...     position_id: str
        ...     exit_price: Decimal | None = None

        >>> result = await handler.handle(ManualClosePositionCommand("T-1"))
    """

    pass
