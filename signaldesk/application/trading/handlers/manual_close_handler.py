"""ManualClosePosition Handler - close a position on operator request."""

import logging

from signaldesk.application.shared import CommandHandler, UnitOfWorkFactory
from signaldesk.application.trading.commands import ManualClosePositionCommand
from signaldesk.application.trading.dtos import ClosedPositionDTO
from signaldesk.application.trading.services.position_closer import PositionCloser
from signaldesk.domain.market_data.ports import PriceSource
from signaldesk.domain.shared import BusinessRuleViolation
from signaldesk.domain.trading.exceptions import (
    PositionAlreadyClosedError,
    PositionNotFoundError,
    PriceUnavailableError,
)
from signaldesk.domain.trading.value_objects import ExitReason

logger = logging.getLogger(__name__)


class ManualClosePositionHandler(CommandHandler[ManualClosePositionCommand, ClosedPositionDTO]):
    """Handler for ManualClosePosition command.

    Flow:
    1. Load the position by external id
    2. Resolve the exit price (explicit, or the current market price)
    3. Close through the PositionCloser with reason MANUAL

    Unlike the monitor path, every failure is raised to the caller.

    Example:
        >>> dto = await handler.handle(ManualClosePositionCommand(position_id="T-1"))
        >>> dto.exit_reason
        'MANUAL'
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        price_source: PriceSource,
        closer: PositionCloser,
    ) -> None:
        self.uow_factory = uow_factory
        self.price_source = price_source
        self.closer = closer

    async def handle(self, command: ManualClosePositionCommand) -> ClosedPositionDTO:
        """Close the position.

        Raises:
            PositionNotFoundError: Unknown position_id.
            PositionAlreadyClosedError: Position is not OPEN, or another
                writer closed it first.
            PriceUnavailableError: No explicit price and no provider answered.
            BusinessRuleViolation: Explicit exit price is not positive.
        """
        logger.info(
            "manual_close.started",
            extra={
                "position_id": command.position_id,
                "exit_price": str(command.exit_price) if command.exit_price is not None else None,
            },
        )

        async with self.uow_factory() as uow:
            position = await uow.positions.get_by_position_id(command.position_id)

        if position is None:
            raise PositionNotFoundError("Position not found", position_id=command.position_id)

        if not position.is_open:
            raise PositionAlreadyClosedError(
                "Position already closed",
                position_id=command.position_id,
                status=position.status.value,
            )

        exit_price = command.exit_price
        if exit_price is None:
            exit_price = await self.price_source.get_price(position.ticker)
            if exit_price is None:
                raise PriceUnavailableError(
                    "No price available for manual close",
                    position_id=command.position_id,
                    ticker=position.ticker,
                )
        elif exit_price <= 0:
            raise BusinessRuleViolation(
                "Exit price must be positive",
                position_id=command.position_id,
                exit_price=str(exit_price),
            )

        closed = await self.closer.close(position, exit_price, ExitReason.MANUAL)
        if not closed:
            raise PositionAlreadyClosedError(
                "Position was closed concurrently",
                position_id=command.position_id,
            )

        return ClosedPositionDTO.from_entity(position)
