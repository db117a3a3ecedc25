"""Ports for the Market Data bounded context."""

from .price_provider import PriceProvider, PriceSource

__all__ = ["PriceProvider", "PriceSource"]
