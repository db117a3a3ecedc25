"""Exceptions for the Market Data bounded context."""

from .price_exceptions import CircuitBreakerOpenError, PriceProviderError, ProviderResponseError

__all__ = [
    "PriceProviderError",
    "ProviderResponseError",
    "CircuitBreakerOpenError",
]
