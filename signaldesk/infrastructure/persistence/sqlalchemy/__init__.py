"""SQLAlchemy persistence layer."""

from .database import create_engine, create_session_factory, create_tables
from .mappers import PositionMapper
from .models import Base, PositionModel, SignalModel
from .repositories import SQLAlchemyPositionRepository
from .unit_of_work import SQLAlchemyUnitOfWork, create_unit_of_work

__all__ = [
    # ORM Models
    "Base",
    "PositionModel",
    "SignalModel",
    # Mapping
    "PositionMapper",
    # Repositories
    "SQLAlchemyPositionRepository",
    # Unit of Work
    "SQLAlchemyUnitOfWork",
    "create_unit_of_work",
    # Engine
    "create_engine",
    "create_session_factory",
    "create_tables",
]
