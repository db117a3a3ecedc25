"""TwelveData quote adapter - primary price provider.

``GET {base_url}/price?symbol=AAPL&apikey=...`` answers ``{"price": "175.50"}``
on success. Errors come back as HTTP 200 with
``{"code": 400, "status": "error", "message": "..."}``, so the body is
checked as well as the status code.
"""

from decimal import Decimal

import httpx

from signaldesk.domain.market_data.exceptions import ProviderResponseError
from signaldesk.domain.market_data.ports import PriceProvider

from ._parsing import parse_json, to_decimal


class TwelveDataAdapter(PriceProvider):
    """TwelveData ``/price`` endpoint.

    Example:
        >>> async with httpx.AsyncClient() as client:
        ...     adapter = TwelveDataAdapter(client, api_key="key")
        ...     await adapter.fetch_price("AAPL")
        Decimal('175.50')
    """

    name = "twelvedata"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        base_url: str = "https://api.twelvedata.com",
        timeout: float = 5.0,
    ) -> None:
        """Initialize TwelveData adapter.

        Args:
            client: Shared HTTP client (owned by the caller).
            api_key: TwelveData API key.
            base_url: API root.
            timeout: Per-call timeout in seconds.
        """
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def fetch_price(self, ticker: str) -> Decimal:
        response = await self._client.get(
            f"{self._base_url}/price",
            params={"symbol": ticker, "apikey": self._api_key},
            timeout=self._timeout,
        )
        data = parse_json(response, self.name)

        if not isinstance(data, dict):
            raise ProviderResponseError("Unexpected payload shape", provider=self.name)
        if data.get("status") == "error":
            raise ProviderResponseError(
                "Provider returned an error",
                provider=self.name,
                ticker=ticker,
                code=data.get("code"),
                detail=data.get("message"),
            )

        return to_decimal(data.get("price"), self.name)
