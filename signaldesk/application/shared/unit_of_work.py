"""Unit of Work pattern - manages transactions.

UnitOfWork provides:
- Atomic operations (all or nothing)
- Transaction boundary
- Single commit per use case
"""

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Optional, Type

from signaldesk.domain.trading.repositories import PositionRepository


class UnitOfWork(ABC):
    """Abstract Unit of Work interface.

    Example (Use case uses):
        >>> async with uow:
        ...     position = await uow.positions.get_by_position_id("T-1")
        ...     position.close(Decimal("180.00"), ExitReason.TARGET_1)
        ...     await uow.positions.update_on_close(position)
        ...     await uow.commit()  # Single commit for entire operation

    Leaving the block with an exception rolls back; leaving it without
    ``commit()`` discards the changes.
    """

    @abstractmethod
    async def __aenter__(self) -> "UnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        """Exit async context manager.

        Note:
            If exc_type is not None, must call rollback().
        """
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Commit transaction.

        Raises:
            Exception: If commit failed.
        """
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Rollback transaction."""
        pass

    @property
    @abstractmethod
    def positions(self) -> PositionRepository:
        """Position repository bound to this unit of work."""
        pass
