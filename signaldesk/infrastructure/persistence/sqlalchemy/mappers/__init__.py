"""Domain ↔ ORM mappers."""

from .position_mapper import PositionMapper

__all__ = ["PositionMapper"]
