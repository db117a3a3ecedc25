"""Exceptions for the Trading bounded context."""

from .trading_exceptions import (
    PositionAlreadyClosedError,
    PositionNotFoundError,
    PriceUnavailableError,
)

__all__ = [
    "PositionNotFoundError",
    "PositionAlreadyClosedError",
    "PriceUnavailableError",
]
