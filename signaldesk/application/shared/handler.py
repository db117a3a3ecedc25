"""Base Handler classes for Commands and Queries.

Handler - orchestrates domain logic to carry out one use case.
"""

from abc import ABC, abstractmethod
from typing import Callable, Generic, TypeVar

from .command import Command
from .query import Query
from .unit_of_work import UnitOfWork

TCommand = TypeVar("TCommand", bound=Command)
TQuery = TypeVar("TQuery", bound=Query)
TResult = TypeVar("TResult")

# Each call opens an independent unit of work (own session), so concurrent
# use cases never share a transaction.
UnitOfWorkFactory = Callable[[], UnitOfWork]


class CommandHandler(ABC, Generic[TCommand, TResult]):
    """Base class for command handlers.

    A command handler:
    - Loads aggregates through a Unit of Work
    - Executes domain logic (aggregate methods)
    - Commits once
    - Publishes domain events after the commit

    Example:
        >>> class EnableTrailingStopHandler(CommandHandler[EnableTrailingStopCommand, None]):
        ...     async def handle(self, command):
        ...         async with self.uow_factory() as uow:
        ...             await uow.positions.set_trailing(command.position_id, True)
        ...             await uow.commit()
    """

    @abstractmethod
    async def handle(self, command: TCommand) -> TResult:
        """Handle command and return result.

        Raises:
            DomainException: If business rule violated.
        """
        pass


class QueryHandler(ABC, Generic[TQuery, TResult]):
    """Base class for query handlers (read-only, no side effects)."""

    @abstractmethod
    async def handle(self, query: TQuery) -> TResult:
        pass
