"""Alpaca market data adapter - fallback price provider.

``GET {data_url}/v2/stocks/{ticker}/trades/latest`` with key headers answers
``{"symbol": "AAPL", "trade": {"p": 175.5, ...}}``.
"""

from decimal import Decimal

import httpx

from signaldesk.domain.market_data.exceptions import ProviderResponseError
from signaldesk.domain.market_data.ports import PriceProvider

from ._parsing import parse_json, to_decimal


class AlpacaAdapter(PriceProvider):
    """Alpaca latest-trade endpoint.

    Example:
        >>> async with httpx.AsyncClient() as client:
        ...     adapter = AlpacaAdapter(client, api_key="id", api_secret="secret")
        ...     await adapter.fetch_price("AAPL")
        Decimal('175.5')
    """

    name = "alpaca"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        api_secret: str,
        data_url: str = "https://data.alpaca.markets",
        timeout: float = 5.0,
    ) -> None:
        self._client = client
        self._headers = {
            "APCA-API-KEY-ID": api_key,
            "APCA-API-SECRET-KEY": api_secret,
        }
        self._data_url = data_url.rstrip("/")
        self._timeout = timeout

    async def fetch_price(self, ticker: str) -> Decimal:
        response = await self._client.get(
            f"{self._data_url}/v2/stocks/{ticker}/trades/latest",
            headers=self._headers,
            timeout=self._timeout,
        )
        data = parse_json(response, self.name)

        trade = data.get("trade") if isinstance(data, dict) else None
        if not isinstance(trade, dict):
            raise ProviderResponseError("Payload has no trade", provider=self.name, ticker=ticker)

        return to_decimal(trade.get("p"), self.name)
