"""Tests for the fallback price source and its factory."""

import asyncio
from decimal import Decimal

import httpx
import pytest

from signaldesk.config import Settings
from signaldesk.domain.market_data.exceptions import ProviderResponseError
from signaldesk.domain.market_data.ports import PriceProvider
from signaldesk.infrastructure.market_data import (
    CircuitBreaker,
    CircuitState,
    FallbackPriceSource,
    GuardedProvider,
    create_price_source,
)


class StubProvider(PriceProvider):
    """Provider returning canned prices or raising canned errors."""

    def __init__(self, name, price=None, error=None, delay=0.0):
        self.name = name
        self._price = price
        self._error = error
        self._delay = delay
        self.calls = 0

    async def fetch_price(self, ticker):
        self.calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._price


def guarded(provider, failure_threshold=5):
    return GuardedProvider(
        provider, CircuitBreaker(provider.name, failure_threshold=failure_threshold)
    )


class TestFallbackPriceSource:
    @pytest.mark.asyncio
    async def test_primary_wins(self):
        primary = StubProvider("twelvedata", price=Decimal("175.50"))
        fallback = StubProvider("alpaca", price=Decimal("175.40"))
        source = FallbackPriceSource([guarded(primary), guarded(fallback)])

        price = await source.get_price("AAPL")

        assert price == Decimal("175.50")
        assert fallback.calls == 0

    @pytest.mark.asyncio
    async def test_falls_back_on_provider_error(self):
        primary = StubProvider(
            "twelvedata", error=ProviderResponseError("error body", provider="twelvedata")
        )
        fallback = StubProvider("alpaca", price=Decimal("175.40"))
        source = FallbackPriceSource([guarded(primary), guarded(fallback)])

        assert await source.get_price("AAPL") == Decimal("175.40")
        assert primary.calls == 1

    @pytest.mark.asyncio
    async def test_falls_back_on_transport_error(self):
        primary = StubProvider("twelvedata", error=httpx.ConnectError("refused"))
        fallback = StubProvider("alpaca", price=Decimal("175.40"))
        source = FallbackPriceSource([guarded(primary), guarded(fallback)])

        assert await source.get_price("AAPL") == Decimal("175.40")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_price", [Decimal("0"), Decimal("-3.2")])
    async def test_non_positive_quote_is_rejected(self, bad_price):
        primary = StubProvider("twelvedata", price=bad_price)
        fallback = StubProvider("alpaca", price=Decimal("175.40"))
        source = FallbackPriceSource([guarded(primary), guarded(fallback)])

        assert await source.get_price("AAPL") == Decimal("175.40")

    @pytest.mark.asyncio
    async def test_slow_provider_times_out(self):
        slow = StubProvider("twelvedata", price=Decimal("175.50"), delay=1.0)
        fallback = StubProvider("alpaca", price=Decimal("175.40"))
        source = FallbackPriceSource([guarded(slow), guarded(fallback)], timeout=0.01)

        assert await source.get_price("AAPL") == Decimal("175.40")

    @pytest.mark.asyncio
    async def test_all_providers_failed_returns_none(self):
        source = FallbackPriceSource(
            [
                guarded(StubProvider("twelvedata", error=RuntimeError("boom"))),
                guarded(StubProvider("alpaca", error=httpx.ReadTimeout("slow"))),
            ]
        )

        assert await source.get_price("AAPL") is None

    @pytest.mark.asyncio
    async def test_no_providers_returns_none(self):
        assert await FallbackPriceSource([]).get_price("AAPL") is None

    @pytest.mark.asyncio
    async def test_open_circuit_skips_provider(self):
        """Test: after the threshold the failing provider is no longer called."""
        primary = StubProvider("twelvedata", error=RuntimeError("down"))
        fallback = StubProvider("alpaca", price=Decimal("175.40"))
        primary_guard = guarded(primary, failure_threshold=2)
        source = FallbackPriceSource([primary_guard, guarded(fallback)])

        for _ in range(4):
            assert await source.get_price("AAPL") == Decimal("175.40")

        assert primary.calls == 2
        assert primary_guard.breaker.state == CircuitState.OPEN
        assert fallback.calls == 4

    def test_provider_names_keep_priority_order(self):
        source = FallbackPriceSource(
            [guarded(StubProvider("twelvedata")), guarded(StubProvider("alpaca"))]
        )

        assert source.provider_names == ["twelvedata", "alpaca"]


class TestCreatePriceSource:
    @pytest.mark.asyncio
    async def test_both_providers_configured(self):
        settings = Settings(
            twelvedata_api_key="td",
            alpaca_api_key="id",
            alpaca_api_secret="secret",
        )
        async with httpx.AsyncClient() as client:
            source = create_price_source(settings, client)

        assert source.provider_names == ["twelvedata", "alpaca"]

    @pytest.mark.asyncio
    async def test_providers_without_credentials_are_left_out(self):
        settings = Settings(
            twelvedata_api_key="",
            alpaca_api_key="id",
            alpaca_api_secret="",
        )
        async with httpx.AsyncClient() as client:
            source = create_price_source(settings, client)

        assert source.provider_names == []

    @pytest.mark.asyncio
    async def test_end_to_end_fallback_over_http(self):
        """Test: TwelveData error body → Alpaca answer through one client."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "api.twelvedata.com":
                return httpx.Response(200, json={"status": "error", "code": 429})
            return httpx.Response(200, json={"trade": {"p": "176.05"}})

        settings = Settings(
            twelvedata_api_key="td",
            alpaca_api_key="id",
            alpaca_api_secret="secret",
        )
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            source = create_price_source(settings, client)
            price = await source.get_price("AAPL")

        assert price == Decimal("176.05")
