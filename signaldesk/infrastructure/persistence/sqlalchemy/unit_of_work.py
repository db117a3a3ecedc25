"""SQLAlchemy Unit of Work implementation."""

import logging
from types import TracebackType
from typing import Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from signaldesk.application.shared import UnitOfWork
from signaldesk.domain.trading.repositories import PositionRepository
from signaldesk.infrastructure.persistence.sqlalchemy.repositories import (
    SQLAlchemyPositionRepository,
)

logger = logging.getLogger(__name__)


class SQLAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of Unit of Work pattern.

    Responsibilities:
    - Owns one AsyncSession per ``async with`` block
    - Commit/rollback of that session's transaction
    - Automatic rollback when the block raises
    - Lazy initialization of repositories

    The instance is reusable: every ``async with`` opens a fresh session.

    Example:
        >>> uow = SQLAlchemyUnitOfWork(session_factory)
        >>> async with uow:
        ...     positions = await uow.positions.list_open()
        >>> async with uow:
        ...     position = await uow.positions.get_by_position_id("T-1")
        ...     position.close(Decimal("172.00"), ExitReason.STOP_LOSS)
        ...     await uow.positions.update_on_close(position)
        ...     await uow.commit()
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize Unit of Work.

        Args:
            session_factory: SQLAlchemy async session factory.
        """
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._positions: Optional[PositionRepository] = None

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        # SQLAlchemy 2.0 auto-begins on first statement
        self._session = self._session_factory()
        logger.debug("unit_of_work.started")
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        try:
            if exc_type is not None:
                await self.rollback()
                logger.warning(
                    "unit_of_work.rolled_back",
                    extra={"exception_type": exc_type.__name__},
                )
        finally:
            if self._session:
                await self._session.close()
                self._session = None
                self._positions = None

            logger.debug("unit_of_work.closed")

    async def commit(self) -> None:
        """Commit transaction.

        Raises:
            Exception: If commit failed (DB error, constraint violation, etc.).
        """
        if self._session is None:
            raise RuntimeError("Unit of Work not started (use async with)")

        try:
            await self._session.commit()
            logger.debug("unit_of_work.committed")
        except Exception as e:
            logger.error("unit_of_work.commit_failed", extra={"error": str(e)})
            await self.rollback()
            raise

    async def rollback(self) -> None:
        if self._session is None:
            raise RuntimeError("Unit of Work not started (use async with)")

        await self._session.rollback()

    @property
    def positions(self) -> PositionRepository:
        if self._session is None:
            raise RuntimeError("Unit of Work not started (use async with)")

        if self._positions is None:
            self._positions = SQLAlchemyPositionRepository(self._session)

        return self._positions


def create_unit_of_work(
    session_factory: async_sessionmaker[AsyncSession],
) -> SQLAlchemyUnitOfWork:
    """Factory for creating a Unit of Work.

    Example:
        >>> engine = create_engine(settings)
        >>> uow = create_unit_of_work(create_session_factory(engine))
    """
    return SQLAlchemyUnitOfWork(session_factory)
