"""Fallback price source - tries quote providers in priority order.

The first provider that returns a well-formed positive quote wins. Provider
failures never escape: they are logged at debug level and the next provider
is tried. When nothing answers, the caller gets ``None`` (NotAvailable).
"""

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from signaldesk.domain.market_data.exceptions import ProviderResponseError
from signaldesk.domain.market_data.ports import PriceProvider, PriceSource

from .circuit_breaker import CircuitBreaker

logger = logging.getLogger(__name__)


@dataclass
class GuardedProvider:
    """A provider paired with its own circuit breaker."""

    provider: PriceProvider
    breaker: CircuitBreaker

    @property
    def name(self) -> str:
        return self.provider.name


class FallbackPriceSource(PriceSource):
    """Price source over an ordered list of providers.

    Example:
        >>> source = FallbackPriceSource([
        ...     GuardedProvider(twelvedata, CircuitBreaker("twelvedata")),
        ...     GuardedProvider(alpaca, CircuitBreaker("alpaca")),
        ... ])
        >>> await source.get_price("AAPL")
        Decimal('175.50')
        >>> await source.get_price("NOPE")  # every provider failed
        None
    """

    def __init__(self, providers: Sequence[GuardedProvider], timeout: float = 5.0) -> None:
        """Initialize price source.

        Args:
            providers: Providers in priority order.
            timeout: Hard upper bound in seconds for one provider call.
        """
        self._providers = list(providers)
        self._timeout = timeout

    @property
    def provider_names(self) -> list[str]:
        return [guarded.name for guarded in self._providers]

    async def get_price(self, ticker: str) -> Optional[Decimal]:
        for guarded in self._providers:
            try:
                price = await guarded.breaker.call(self._fetch, guarded.provider, ticker)
            except Exception as e:
                logger.debug(
                    "price_source.provider_failed",
                    extra={
                        "provider": guarded.name,
                        "ticker": ticker,
                        "error_type": type(e).__name__,
                        "error": str(e),
                    },
                )
                continue

            logger.debug(
                "price_source.price_resolved",
                extra={"provider": guarded.name, "ticker": ticker, "price": str(price)},
            )
            return price

        logger.warning(
            "price_source.all_providers_failed",
            extra={"ticker": ticker, "providers": self.provider_names},
        )
        return None

    async def _fetch(self, provider: PriceProvider, ticker: str) -> Decimal:
        # Runs inside the breaker so timeouts and bad quotes count as failures
        price = await asyncio.wait_for(provider.fetch_price(ticker), timeout=self._timeout)
        if price <= 0:
            raise ProviderResponseError(
                "Non-positive price",
                provider=provider.name,
                ticker=ticker,
                price=str(price),
            )
        return price
