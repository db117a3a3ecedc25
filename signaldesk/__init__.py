"""SignalDesk - paper-trading position exit engine."""

__version__ = "1.0.0"
