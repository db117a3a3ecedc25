"""Market data infrastructure - quote adapters, breakers, fallback source."""

from .adapters import AlpacaAdapter, TwelveDataAdapter
from .circuit_breaker import CircuitBreaker, CircuitState
from .factory import create_price_source
from .price_source import FallbackPriceSource, GuardedProvider

__all__ = [
    "TwelveDataAdapter",
    "AlpacaAdapter",
    "CircuitBreaker",
    "CircuitState",
    "FallbackPriceSource",
    "GuardedProvider",
    "create_price_source",
]
