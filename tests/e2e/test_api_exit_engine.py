"""E2E tests for the exit engine HTTP control surface.

Full flow through FastAPI, the lifespan-built ExitEngine and a file-backed
SQLite database:
1. Health and monitor status
2. Monitor start/stop
3. Manual close and trailing-stop activation with error mapping
"""

import time
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from signaldesk.config import Settings
from signaldesk.domain.market_data.ports import PriceSource
from signaldesk.domain.trading.entities import Position
from signaldesk.domain.trading.value_objects import PositionSide
from signaldesk.infrastructure.persistence.sqlalchemy import Base, PositionMapper, SignalModel
from signaldesk.main import create_app


class FixedPriceSource(PriceSource):
    """Quotes from a dict; unknown tickers are unavailable."""

    def __init__(self, prices):
        self.prices = prices

    async def get_price(self, ticker):
        return self.prices.get(ticker)


def seed(db_path, position_id, ticker="AAPL", trailing_enabled=False):
    """Insert a signal and an OPEN LONG position with a synchronous engine."""
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        signal = SignalModel(
            action="LONG",
            ticker=ticker,
            entry_price=Decimal("175.50"),
            stop_loss=Decimal("172.00"),
            target1=Decimal("180.00"),
            atr=Decimal("2.0"),
        )
        session.add(signal)
        session.flush()

        position = Position.open(
            position_id=position_id,
            signal_id=signal.id,
            ticker=ticker,
            side=PositionSide.LONG,
            quantity=Decimal("10"),
            entry_price=Decimal("175.50"),
            stop_loss=Decimal("172.00"),
            target1=Decimal("180.00"),
            atr=Decimal("2.0"),
            trailing_enabled=trailing_enabled,
            entered_at=datetime.now(timezone.utc) - timedelta(minutes=30),
        )
        session.add(PositionMapper().to_model(position))
        session.commit()

    engine.dispose()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "exit_engine.db"


@pytest.fixture
def prices():
    return {"AAPL": Decimal("177.00")}


@pytest.fixture
def client(db_path, prices):
    seed(db_path, "TRD-1")
    seed(db_path, "TRD-2")

    settings = Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{db_path}",
        monitor_autostart=False,
        monitor_interval_seconds=60.0,
        log_format="console",
    )
    app = create_app(settings, price_source=FixedPriceSource(prices))

    with TestClient(app) as test_client:
        yield test_client


class TestHealthAndMonitorAPI:
    """E2E tests for health and monitor endpoints."""

    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["monitor_running"] is False
        assert "X-Request-ID" in response.headers

    def test_monitor_status(self, client):
        response = client.get("/api/v1/monitor/status")

        assert response.status_code == 200
        data = response.json()
        assert data["is_running"] is False
        assert data["open_position_count"] == 2
        assert data["interval_seconds"] == 60.0

    def test_start_and_stop(self, client):
        started = client.post("/api/v1/monitor/start")
        assert started.status_code == 200
        assert started.json() == {"changed": True, "is_running": True}

        again = client.post("/api/v1/monitor/start")
        assert again.json() == {"changed": False, "is_running": True}

        assert client.get("/health").json()["monitor_running"] is True

        stopped = client.post("/api/v1/monitor/stop")
        assert stopped.json() == {"changed": True, "is_running": False}
        assert client.post("/api/v1/monitor/stop").json()["changed"] is False


class TestPositionsAPI:
    """E2E tests for manual close and trailing stop endpoints."""

    def test_close_at_explicit_price(self, client):
        response = client.post(
            "/api/v1/positions/TRD-1/close", json={"exit_price": "180.50"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["position_id"] == "TRD-1"
        assert data["exit_reason"] == "MANUAL"
        assert Decimal(data["exit_price"]) == Decimal("180.50")
        assert Decimal(data["pnl"]) == Decimal("50.00")
        assert data["holding_period_minutes"] == 30

        status = client.get("/api/v1/monitor/status").json()
        assert status["open_position_count"] == 1

    def test_close_at_market_price(self, client):
        response = client.post("/api/v1/positions/TRD-2/close")

        assert response.status_code == 200
        assert Decimal(response.json()["exit_price"]) == Decimal("177.00")

    def test_close_unknown_position(self, client):
        response = client.post("/api/v1/positions/TRD-404/close")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "PositionNotFoundError"

    def test_close_twice(self, client):
        client.post("/api/v1/positions/TRD-1/close", json={"exit_price": "180.50"})

        response = client.post("/api/v1/positions/TRD-1/close", json={"exit_price": "181"})

        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "PositionAlreadyClosedError"

    def test_close_without_price_when_unavailable(self, client, prices):
        prices.pop("AAPL")

        response = client.post("/api/v1/positions/TRD-1/close")

        assert response.status_code == 503
        assert response.json()["detail"]["error"] == "PriceUnavailableError"

    def test_close_rejects_non_positive_price(self, client):
        response = client.post("/api/v1/positions/TRD-1/close", json={"exit_price": "0"})

        assert response.status_code == 422
        assert response.json()["error"] == "ValidationError"

    def test_enable_trailing(self, client):
        response = client.post("/api/v1/positions/TRD-2/trailing")

        assert response.status_code == 200
        assert response.json() == {"position_id": "TRD-2", "trailing_enabled": True}

    def test_enable_trailing_errors(self, client):
        client.post("/api/v1/positions/TRD-1/close", json={"exit_price": "180.50"})

        closed = client.post("/api/v1/positions/TRD-1/trailing")
        missing = client.post("/api/v1/positions/TRD-404/trailing")

        assert closed.status_code == 409
        assert missing.status_code == 404

    def test_monitor_pass_closes_position_at_target(self, client, prices):
        """Monitor started over HTTP closes both positions at TARGET_1."""
        prices["AAPL"] = Decimal("181.00")

        client.post("/api/v1/monitor/start")
        for _ in range(100):
            status = client.get("/api/v1/monitor/status").json()
            if status["passes_completed"]:
                break
            time.sleep(0.02)

        assert status["passes_completed"] >= 1
        assert status["open_position_count"] == 0
