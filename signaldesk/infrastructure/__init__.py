"""Infrastructure layer - adapters for persistence, market data and messaging."""
