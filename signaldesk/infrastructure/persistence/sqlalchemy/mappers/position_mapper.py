"""Position Mapper - converts between Position entity and PositionModel ORM."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from signaldesk.domain.trading.entities import Position
from signaldesk.domain.trading.value_objects import ExitReason, PositionSide, PositionStatus
from signaldesk.infrastructure.persistence.sqlalchemy.models import PositionModel


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PositionMapper:
    """Mapper for Position entity ↔ PositionModel ORM.

    Responsibilities:
    - Convert ORM PositionModel (+ joined signal) → domain Position
    - Convert domain Position → ORM PositionModel for inserts
    - Produce the column values written when a position closes

    Example:
        >>> mapper = PositionMapper()
        >>> model = mapper.to_model(position)  # Domain → ORM
        >>> position_back = mapper.to_entity(model)  # ORM → Domain
    """

    def to_entity(self, model: PositionModel) -> Position:
        """Convert ORM PositionModel → Domain Position entity.

        Args:
            model: SQLAlchemy PositionModel with its signal loaded.

        Returns:
            Domain Position entity (no pending domain events).
        """
        atr = model.signal.atr if model.signal is not None else Decimal("0")

        position = Position(
            id=model.id,
            position_id=model.position_id,
            signal_id=model.signal_id,
            ticker=model.ticker,
            side=PositionSide(model.side),
            quantity=model.quantity,
            entry_price=model.entry_price,
            stop_loss=model.stop_loss,
            target1=model.target1,
            target2=model.target2,
            trailing_enabled=model.trailing,
            entered_at=_as_utc(model.entered_at),
            atr=atr if atr is not None else Decimal("0"),
            status=PositionStatus(model.status),
            exited_at=_as_utc(model.exited_at),
            exit_price=model.exit_price,
            exit_value=model.exit_value,
            exit_reason=ExitReason(model.exit_reason) if model.exit_reason else None,
            pnl=model.pnl,
            pnl_percent=model.pnl_percent,
            r_multiple=model.r_multiple,
            holding_period_minutes=model.holding_period_minutes,
        )

        # Don't replay events from the DB
        position.clear_domain_events()

        return position

    def to_model(self, entity: Position) -> PositionModel:
        """Convert Domain Position entity → ORM PositionModel.

        Args:
            entity: Domain Position entity.

        Returns:
            SQLAlchemy PositionModel.
        """
        model = PositionModel(
            id=entity.id,
            position_id=entity.position_id,
            signal_id=entity.signal_id,
            ticker=entity.ticker,
            side=entity.side.value,
            quantity=entity.quantity,
            entry_price=entity.entry_price,
            entry_value=entity.entry_value,
            stop_loss=entity.stop_loss,
            target1=entity.target1,
            target2=entity.target2,
            trailing=entity.trailing_enabled,
            entered_at=entity.entered_at,
            status=entity.status.value,
        )
        for column, value in self.close_values(entity).items():
            setattr(model, column, value)

        return model

    def close_values(self, entity: Position) -> dict:
        """Column values written by the closing UPDATE.

        Args:
            entity: Position already transitioned to CLOSED in memory.

        Returns:
            Mapping of model attribute → value.
        """
        return {
            "status": entity.status.value,
            "exited_at": entity.exited_at,
            "exit_price": entity.exit_price,
            "exit_value": entity.exit_value,
            "exit_reason": entity.exit_reason.value if entity.exit_reason else None,
            "pnl": entity.pnl,
            "pnl_percent": entity.pnl_percent,
            "r_multiple": entity.r_multiple,
            "holding_period_minutes": entity.holding_period_minutes,
        }
