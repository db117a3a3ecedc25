"""Pytest fixtures for integration tests (in-memory SQLite + stubs)."""

from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from signaldesk.domain.market_data.ports import PriceSource
from signaldesk.infrastructure.messaging import EventBus
from signaldesk.infrastructure.persistence.sqlalchemy import (
    Base,
    SignalModel,
    SQLAlchemyPositionRepository,
    SQLAlchemyUnitOfWork,
)


class StubPriceSource(PriceSource):
    """Price source returning scripted prices.

    A list value is consumed one element per call; ``None`` means
    NotAvailable. Every requested ticker is recorded in ``calls``.
    """

    def __init__(self, prices=None):
        self.prices = dict(prices or {})
        self.calls: list[str] = []

    async def get_price(self, ticker):
        self.calls.append(ticker)
        value = self.prices.get(ticker)
        if isinstance(value, list):
            return value.pop(0) if value else None
        return value


class RecordingSubscriber:
    """Async event handler remembering what it received."""

    def __init__(self):
        self.events = []

    async def __call__(self, event):
        self.events.append(event)


@pytest.fixture
async def engine():
    """Async SQLite engine shared by every session of one test.

    StaticPool keeps a single connection, so the in-memory database
    survives across sessions.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def uow_factory(session_factory):
    """Fresh Unit of Work per call, like the application wiring."""
    return lambda: SQLAlchemyUnitOfWork(session_factory)


@pytest.fixture
def seed_position(session_factory, make_position):
    """Persist a signal + OPEN position and return the stored entity.

    Keyword overrides go to ``make_position``.
    """

    async def _seed(**overrides):
        position = make_position(**overrides)

        async with session_factory() as session:
            signal = SignalModel(
                action=position.side.value,
                ticker=position.ticker,
                timeframe_minutes=5,
                entry_price=position.entry_price,
                stop_loss=position.stop_loss,
                target1=position.target1,
                atr=position.atr,
            )
            session.add(signal)
            await session.flush()

            position.signal_id = signal.id
            await SQLAlchemyPositionRepository(session).add(position)
            await session.commit()

        return position

    return _seed


@pytest.fixture
def load_position(uow_factory):
    """Read a position back from the store by external id."""

    async def _load(position_id):
        async with uow_factory() as uow:
            return await uow.positions.get_by_position_id(position_id)

    return _load


@pytest.fixture
def price_source():
    return StubPriceSource()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def recorder():
    return RecordingSubscriber()


@pytest.fixture
def aapl_prices():
    """The AAPL trailing walk: advance, advance, hold, exit."""
    return [Decimal("176.00"), Decimal("179.00"), Decimal("177.50"), Decimal("175.90")]
