"""Entities (Aggregate Roots) for the Trading bounded context."""

from .position import Position

__all__ = ["Position"]
