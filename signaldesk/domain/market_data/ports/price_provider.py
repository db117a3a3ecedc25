"""Price ports - what the exit engine needs from market data.

Domain defines WHAT is needed (these interfaces); infrastructure adapters
(TwelveData, Alpaca) define HOW.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional


class PriceProvider(ABC):
    """A single external quote endpoint.

    Implementations raise ``PriceProviderError`` (or let transport errors
    propagate); the price source decides what to do with failures.

    Example:
        >>> class TwelveDataProvider(PriceProvider):
        ...     name = "twelvedata"
        ...     async def fetch_price(self, ticker):
        ...         response = await self._client.get("/price", params={"symbol": ticker})
        ...         return Decimal(response.json()["price"])
    """

    name: str = "provider"

    @abstractmethod
    async def fetch_price(self, ticker: str) -> Decimal:
        """Fetch the latest price for ``ticker``.

        Args:
            ticker: Instrument symbol (e.g. "AAPL").

        Returns:
            Latest traded price as reported by the provider.

        Raises:
            PriceProviderError: On non-2xx or malformed responses.
        """
        pass


class PriceSource(ABC):
    """Resolves one current price per ticker, never raising.

    ``None`` is the NotAvailable sentinel: callers skip the ticker for this
    pass instead of treating it as an engine fault.
    """

    @abstractmethod
    async def get_price(self, ticker: str) -> Optional[Decimal]:
        """Get a positive price for ``ticker`` or None if unavailable."""
        pass
