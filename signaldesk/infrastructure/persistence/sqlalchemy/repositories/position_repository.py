"""SQLAlchemy implementation of PositionRepository."""

import logging
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from signaldesk.domain.trading.entities import Position
from signaldesk.domain.trading.repositories import (
    PositionRepository as PositionRepositoryPort,
)
from signaldesk.domain.trading.value_objects import PositionStatus
from signaldesk.infrastructure.persistence.sqlalchemy.mappers import PositionMapper
from signaldesk.infrastructure.persistence.sqlalchemy.models import PositionModel

logger = logging.getLogger(__name__)


class SQLAlchemyPositionRepository(PositionRepositoryPort):
    """SQLAlchemy implementation of PositionRepository port.

    Closing writes are a single conditional UPDATE keyed by the external id
    *and* ``status = 'OPEN'``, so two writers racing to close the same
    position cannot both succeed: the loser sees ``rowcount == 0``.

    Example:
        >>> async with session_factory() as session:
        ...     repo = SQLAlchemyPositionRepository(session)
        ...     for position in await repo.list_open():
        ...         position.close(Decimal("180.00"), ExitReason.TARGET_1)
        ...         await repo.update_on_close(position)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session
        self._mapper = PositionMapper()

    async def add(self, position: Position) -> None:
        model = self._mapper.to_model(position)
        self._session.add(model)
        await self._session.flush()  # Get generated ID
        position.id = model.id

    async def get_by_position_id(self, position_id: str) -> Optional[Position]:
        stmt = select(PositionModel).where(PositionModel.position_id == position_id)

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None

        return self._mapper.to_entity(model)

    async def list_open(self) -> list[Position]:
        """Get all OPEN positions, oldest first."""
        stmt = (
            select(PositionModel)
            .where(PositionModel.status == PositionStatus.OPEN.value)
            .order_by(PositionModel.entered_at.asc(), PositionModel.id.asc())
        )

        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._mapper.to_entity(model) for model in models]

    async def list_open_ids(self) -> set[str]:
        stmt = select(PositionModel.position_id).where(
            PositionModel.status == PositionStatus.OPEN.value
        )

        result = await self._session.execute(stmt)
        return set(result.scalars().all())

    async def count_open(self) -> int:
        stmt = select(func.count(PositionModel.id)).where(
            PositionModel.status == PositionStatus.OPEN.value
        )

        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def update_on_close(self, position: Position) -> bool:
        stmt = (
            update(PositionModel)
            .where(PositionModel.position_id == position.position_id)
            .where(PositionModel.status == PositionStatus.OPEN.value)
            .values(**self._mapper.close_values(position))
        )

        result = await self._session.execute(stmt)
        updated = result.rowcount == 1

        if not updated:
            logger.info(
                "position_repository.close_no_match",
                extra={"position_id": position.position_id},
            )

        return updated

    async def set_trailing(self, position_id: str, enabled: bool) -> bool:
        stmt = (
            update(PositionModel)
            .where(PositionModel.position_id == position_id)
            .where(PositionModel.status == PositionStatus.OPEN.value)
            .values(trailing=enabled)
        )

        result = await self._session.execute(stmt)
        return result.rowcount == 1
