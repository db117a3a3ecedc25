"""Signal ORM Model - read-only reference for the exit engine.

Signals are written by the webhook ingestion side; the exit engine only
reads ``atr`` through the position relationship.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, BigIntPK


class SignalModel(Base):
    """ORM model for the ``signals`` table.

    Persistence only, no business logic.
    """

    __tablename__ = "signals"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    action: Mapped[str] = mapped_column(String(10), nullable=False)  # "LONG" or "SHORT"
    ticker: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    timeframe_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=5)

    entry_price: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=8), nullable=False)
    stop_loss: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=8), nullable=False)
    target1: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=8), nullable=False)
    atr: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=8), nullable=False, default=Decimal("0")
    )

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="TRADED")

    def __repr__(self) -> str:
        return f"<SignalModel(id={self.id}, ticker={self.ticker}, action={self.action})>"
