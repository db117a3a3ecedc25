"""PositionRepository Port - interface for position persistence."""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities import Position


class PositionRepository(ABC):
    """Abstract interface for the position store.

    The store is the single source of truth for ``status``. Closing is a
    conditional write: it only applies while the stored row is still OPEN,
    which makes overlapping passes and concurrent monitor instances safe.

    Example (monitor pass):
        >>> for position in await positions.list_open():
        ...     position.close(price, ExitReason.TARGET_1)
        ...     if not await positions.update_on_close(position):
        ...         pass  # someone else closed it first
    """

    @abstractmethod
    async def add(self, position: Position) -> None:
        """Insert a new position and assign its storage key.

        Args:
            position: Position entity (``id`` is None).
        """
        pass

    @abstractmethod
    async def get_by_position_id(self, position_id: str) -> Optional[Position]:
        """Get position by external identifier.

        Args:
            position_id: External position identifier.

        Returns:
            Position entity or None.
        """
        pass

    @abstractmethod
    async def list_open(self) -> list[Position]:
        """Get all OPEN positions together with their signal ATR.

        Returns:
            OPEN positions, oldest first.
        """
        pass

    @abstractmethod
    async def list_open_ids(self) -> set[str]:
        """External ids of the positions currently OPEN."""
        pass

    @abstractmethod
    async def count_open(self) -> int:
        """Count OPEN positions."""
        pass

    @abstractmethod
    async def update_on_close(self, position: Position) -> bool:
        """Persist the closing fields of ``position`` if still OPEN.

        Args:
            position: Position already transitioned to CLOSED in memory.

        Returns:
            True if the row was updated, False if no OPEN row matched
            (unknown id, or already closed by someone else).
        """
        pass

    @abstractmethod
    async def set_trailing(self, position_id: str, enabled: bool) -> bool:
        """Toggle the trailing-stop rule of an OPEN position.

        Returns:
            True if an OPEN position was updated.
        """
        pass
