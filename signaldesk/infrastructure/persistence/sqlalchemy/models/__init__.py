"""SQLAlchemy ORM models."""

from .base import Base
from .position_model import PositionModel
from .signal_model import SignalModel

__all__ = [
    "Base",
    "PositionModel",
    "SignalModel",
]
