"""Engine and session factory construction."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from signaldesk.config import Settings

from .models import Base


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine described by settings.

    Pool sizing only applies to server databases; SQLite URLs (tests, local
    runs) get SQLAlchemy's default pool for the driver.
    """
    if settings.database_url.startswith("sqlite"):
        return create_async_engine(settings.database_url, echo=settings.db_echo)

    return create_async_engine(
        settings.database_url,
        echo=settings.db_echo,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Entities are read after commit in async code
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables (development only; production schemas are migrated)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
