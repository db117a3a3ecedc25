"""Domain Layer - pure business logic.

Bounded Contexts:
- trading: Position lifecycle, exit rules, trailing stops, P&L
- market_data: Quote provider and price source ports
- shared: Common base classes

Key Principles:
- Zero dependencies on infrastructure
- Rich domain models (Position owns its close transition)
"""

# Shared kernel
from .shared import AggregateRoot, DomainEvent, DomainException

__all__ = [
    "AggregateRoot",
    "DomainEvent",
    "DomainException",
]
