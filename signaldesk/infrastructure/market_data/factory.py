"""Builds the configured price source from settings."""

import logging

import httpx

from signaldesk.config import Settings

from .adapters import AlpacaAdapter, TwelveDataAdapter
from .circuit_breaker import CircuitBreaker
from .price_source import FallbackPriceSource, GuardedProvider

logger = logging.getLogger(__name__)


def create_price_source(settings: Settings, client: httpx.AsyncClient) -> FallbackPriceSource:
    """Create the fallback price source: TwelveData first, then Alpaca.

    Providers without credentials are left out entirely.

    Args:
        settings: Application settings.
        client: Shared HTTP client; the caller closes it.

    Returns:
        FallbackPriceSource (possibly with no providers).
    """
    providers: list[GuardedProvider] = []

    if settings.twelvedata_api_key:
        providers.append(
            _guard(
                TwelveDataAdapter(
                    client,
                    api_key=settings.twelvedata_api_key,
                    base_url=settings.twelvedata_base_url,
                    timeout=settings.price_provider_timeout,
                ),
                settings,
            )
        )

    if settings.alpaca_api_key and settings.alpaca_api_secret:
        providers.append(
            _guard(
                AlpacaAdapter(
                    client,
                    api_key=settings.alpaca_api_key,
                    api_secret=settings.alpaca_api_secret,
                    data_url=settings.alpaca_data_url,
                    timeout=settings.price_provider_timeout,
                ),
                settings,
            )
        )

    if providers:
        logger.info(
            "price_source.configured",
            extra={"providers": [guarded.name for guarded in providers]},
        )
    else:
        logger.warning("price_source.no_providers_configured")

    return FallbackPriceSource(providers, timeout=settings.price_provider_timeout)


def _guard(provider, settings: Settings) -> GuardedProvider:
    return GuardedProvider(
        provider=provider,
        breaker=CircuitBreaker(
            provider.name,
            failure_threshold=settings.circuit_breaker_failure_threshold,
            timeout_seconds=settings.circuit_breaker_recovery_timeout,
        ),
    )
