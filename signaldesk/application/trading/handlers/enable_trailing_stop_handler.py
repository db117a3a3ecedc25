"""EnableTrailingStop Handler."""

import logging

from signaldesk.application.shared import CommandHandler, UnitOfWorkFactory
from signaldesk.application.trading.commands import EnableTrailingStopCommand
from signaldesk.domain.trading.exceptions import (
    PositionAlreadyClosedError,
    PositionNotFoundError,
)

logger = logging.getLogger(__name__)


class EnableTrailingStopHandler(CommandHandler[EnableTrailingStopCommand, None]):
    """Turn on the trailing-stop rule of an OPEN position.

    Idempotent: enabling an already-trailing position succeeds. The next
    monitoring pass starts the watermark at the static stop-loss.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    async def handle(self, command: EnableTrailingStopCommand) -> None:
        async with self.uow_factory() as uow:
            updated = await uow.positions.set_trailing(command.position_id, True)

            if not updated:
                position = await uow.positions.get_by_position_id(command.position_id)
                if position is None:
                    raise PositionNotFoundError(
                        "Position not found", position_id=command.position_id
                    )
                raise PositionAlreadyClosedError(
                    "Cannot enable trailing stop on a closed position",
                    position_id=command.position_id,
                    status=position.status.value,
                )

            await uow.commit()

        logger.info("trailing_stop.enabled", extra={"position_id": command.position_id})
