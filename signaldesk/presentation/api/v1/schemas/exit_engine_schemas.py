"""Pydantic schemas for the exit engine API."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from signaldesk.application.trading import ClosedPositionDTO, MonitorStatus


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================


class ManualCloseRequest(BaseModel):
    """Request schema for a manual close.

    Example:
        {"exit_price": "181.25"}
        {}  # use the current market price
    """

    exit_price: Decimal | None = Field(
        default=None,
        description="Explicit exit price; omitted means current market price",
        gt=0,
    )

    model_config = {"json_schema_extra": {"example": {"exit_price": "181.25"}}}


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================


class MonitorStatusResponse(BaseModel):
    """Monitor state and open position count."""

    is_running: bool = Field(..., description="Whether the monitor loop is RUNNING")
    open_position_count: int = Field(..., description="Positions currently OPEN")
    interval_seconds: float = Field(..., description="Seconds between passes")
    passes_completed: int = Field(0, description="Passes finished since process start")
    passes_failed: int = Field(0, description="Passes aborted by an error")
    last_pass_at: datetime | None = Field(None, description="End of the last completed pass")
    tracked_trailing_stops: int = Field(0, description="Positions with an active watermark")

    @classmethod
    def from_dto(cls, dto: MonitorStatus) -> "MonitorStatusResponse":
        return cls(
            is_running=dto.is_running,
            open_position_count=dto.open_position_count,
            interval_seconds=dto.interval_seconds,
            passes_completed=dto.passes_completed,
            passes_failed=dto.passes_failed,
            last_pass_at=dto.last_pass_at,
            tracked_trailing_stops=dto.tracked_trailing_stops,
        )


class MonitorActionResponse(BaseModel):
    """Result of a start/stop request."""

    changed: bool = Field(..., description="False when the monitor was already in that state")
    is_running: bool


class ClosedPositionResponse(BaseModel):
    """Realized outcome of a closed position."""

    position_id: str
    ticker: str
    side: str
    exit_reason: str
    entry_price: Decimal
    exit_price: Decimal
    exit_value: Decimal
    quantity: Decimal
    pnl: Decimal
    pnl_percent: Decimal
    r_multiple: Decimal
    holding_period_minutes: int
    exited_at: datetime

    model_config = {"from_attributes": True}

    @classmethod
    def from_dto(cls, dto: ClosedPositionDTO) -> "ClosedPositionResponse":
        return cls.model_validate(dto)


class TrailingStopResponse(BaseModel):
    position_id: str
    trailing_enabled: bool = True


class ErrorResponse(BaseModel):
    """Standard error body."""

    error: str = Field(..., description="Error type/code")
    message: str = Field(..., description="Human-readable error message")
