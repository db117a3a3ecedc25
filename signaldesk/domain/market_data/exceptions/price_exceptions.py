"""Exceptions for the Market Data bounded context.

These never leave the price source: every one of them means "try the next
provider".
"""

from signaldesk.domain.shared import DomainException


class PriceProviderError(DomainException):
    """Base exception for quote provider failures (network, timeout, etc)."""

    pass


class ProviderResponseError(PriceProviderError):
    """Raised when a provider answered with non-2xx or a malformed payload."""

    pass


class CircuitBreakerOpenError(PriceProviderError):
    """Raised when a provider is skipped because its circuit is OPEN."""

    pass
