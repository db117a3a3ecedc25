"""Position ORM Model - SQLAlchemy mapping for the Position aggregate.

Positions live in the ``trades`` table; the external identifier is stored
in ``trade_id``.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, BigIntPK
from .signal_model import SignalModel


class PositionModel(Base):
    """ORM model for the Position aggregate.

    Persistence only, no business logic.
    Business logic lives in domain.trading.entities.Position.
    """

    __tablename__ = "trades"

    # Primary key
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    # External identifier
    position_id: Mapped[str] = mapped_column("trade_id", String(64), nullable=False, unique=True)

    # Foreign keys
    signal_id: Mapped[int] = mapped_column(
        BigIntPK, ForeignKey("signals.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Entry terms
    ticker: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    side: Mapped[str] = mapped_column(String(10), nullable=False)  # "LONG" or "SHORT"
    quantity: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=8), nullable=False)
    entry_price: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=8), nullable=False)
    entry_value: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=8), nullable=False)
    stop_loss: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=8), nullable=False)
    target1: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=8), nullable=False)
    target2: Mapped[Decimal | None] = mapped_column(Numeric(precision=20, scale=8), nullable=True)
    trailing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    entered_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Lifecycle
    status: Mapped[str] = mapped_column(String(10), nullable=False, index=True)  # "OPEN", "CLOSED"

    # Outcome (filled at close)
    exited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    exit_price: Mapped[Decimal | None] = mapped_column(Numeric(precision=20, scale=8), nullable=True)
    exit_value: Mapped[Decimal | None] = mapped_column(Numeric(precision=20, scale=8), nullable=True)
    exit_reason: Mapped[str | None] = mapped_column(String(20), nullable=True)
    pnl: Mapped[Decimal | None] = mapped_column(Numeric(precision=20, scale=8), nullable=True)
    pnl_percent: Mapped[Decimal | None] = mapped_column(Numeric(precision=20, scale=8), nullable=True)
    r_multiple: Mapped[Decimal | None] = mapped_column(Numeric(precision=20, scale=8), nullable=True)
    holding_period_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # atr is read from the originating signal on every load
    signal: Mapped[SignalModel] = relationship(lazy="joined")

    __table_args__ = (
        # Query: open positions per ticker (monitor pass)
        Index("ix_trades_status_ticker", "status", "ticker"),
    )

    def __repr__(self) -> str:
        return (
            f"<PositionModel(id={self.id}, position_id={self.position_id}, "
            f"ticker={self.ticker}, side={self.side}, status={self.status})>"
        )
