"""Quote provider adapters."""

from .alpaca_adapter import AlpacaAdapter
from .twelvedata_adapter import TwelveDataAdapter

__all__ = ["TwelveDataAdapter", "AlpacaAdapter"]
