"""Position API routes - manual close and trailing stop activation."""

import logging

from fastapi import APIRouter, HTTPException, status

from signaldesk.domain.shared import BusinessRuleViolation, DomainException
from signaldesk.domain.trading.exceptions import (
    PositionAlreadyClosedError,
    PositionNotFoundError,
    PriceUnavailableError,
)
from signaldesk.presentation.api.dependencies import ExitEngineDep
from signaldesk.presentation.api.v1.schemas import (
    ClosedPositionResponse,
    ErrorResponse,
    ManualCloseRequest,
    TrailingStopResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/positions", tags=["Positions"])

# Most specific first
_ERROR_STATUS: tuple[tuple[type[DomainException], int], ...] = (
    (PositionNotFoundError, status.HTTP_404_NOT_FOUND),
    (PositionAlreadyClosedError, status.HTTP_409_CONFLICT),
    (PriceUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (BusinessRuleViolation, 422),
)


def _to_http_error(exc: DomainException) -> HTTPException:
    for exc_type, status_code in _ERROR_STATUS:
        if isinstance(exc, exc_type):
            return HTTPException(
                status_code=status_code,
                detail={"error": type(exc).__name__, "message": exc.message},
            )
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": type(exc).__name__, "message": exc.message},
    )


@router.post(
    "/{position_id}/close",
    response_model=ClosedPositionResponse,
    status_code=status.HTTP_200_OK,
    summary="Close open position",
    description="""
    Close an open position with reason MANUAL.

    **Returns**:
    - 200: Position closed, realized outcome in the body
    - 404: Position not found
    - 409: Position already closed
    - 422: Invalid exit price
    - 503: No exit price given and no provider could quote the ticker
    """,
    responses={
        404: {"model": ErrorResponse, "description": "Position not found"},
        409: {"model": ErrorResponse, "description": "Position already closed"},
        503: {"model": ErrorResponse, "description": "Price unavailable"},
    },
)
async def close_position(
    position_id: str,
    engine: ExitEngineDep,
    payload: ManualCloseRequest | None = None,
) -> ClosedPositionResponse:
    exit_price = payload.exit_price if payload is not None else None

    try:
        dto = await engine.manual_close_trade(position_id, exit_price=exit_price)
    except DomainException as e:
        logger.warning(
            "api.close_position.rejected",
            extra={"position_id": position_id, "error": str(e)},
        )
        raise _to_http_error(e) from e

    return ClosedPositionResponse.from_dto(dto)


@router.post(
    "/{position_id}/trailing",
    response_model=TrailingStopResponse,
    status_code=status.HTTP_200_OK,
    summary="Enable trailing stop",
    responses={
        404: {"model": ErrorResponse, "description": "Position not found"},
        409: {"model": ErrorResponse, "description": "Position already closed"},
    },
)
async def enable_trailing_stop(position_id: str, engine: ExitEngineDep) -> TrailingStopResponse:
    try:
        await engine.enable_trailing_stop(position_id)
    except DomainException as e:
        raise _to_http_error(e) from e

    return TrailingStopResponse(position_id=position_id)
