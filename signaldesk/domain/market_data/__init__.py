"""Market Data Bounded Context - quote providers and the price source port."""

from .exceptions import CircuitBreakerOpenError, PriceProviderError, ProviderResponseError
from .ports import PriceProvider, PriceSource

__all__ = [
    "PriceProvider",
    "PriceSource",
    "PriceProviderError",
    "ProviderResponseError",
    "CircuitBreakerOpenError",
]
